"""Tests for evals/scoring.py: score directive parsing."""

import pytest

from book_rag.core.exceptions import ParseError
from book_rag.evals.scoring import parse_score_response


class TestParseScoreResponse:
    @pytest.mark.parametrize(
        "response, expected",
        [
            ("The answer is well grounded.\nScore: 4", 4),
            ("Grounded.\nscore:5", 5),
            ("Grounded.\nSCORE : 2", 2),
            ("Grounded.\n**Score:** 3", 3),
            ("Grounded.\n**Score**: 1", 1),
            ("Grounded.\nScore: **5**", 5),
        ],
    )
    def test_accepts_directive_variants(self, response: str, expected: int) -> None:
        score, _ = parse_score_response(response)
        assert score == expected

    def test_reasoning_is_trimmed_prefix(self) -> None:
        score, reasoning = parse_score_response(
            "  The claims match the context.\n\nScore: 5\nExtra trailing text"
        )
        assert score == 5
        assert reasoning == "The claims match the context."

    def test_first_directive_wins(self) -> None:
        score, _ = parse_score_response("Reasoning.\nScore: 2\nScore: 5")
        assert score == 2

    def test_missing_directive_fails(self) -> None:
        with pytest.raises(ParseError):
            parse_score_response("I think this deserves a four out of five.")

    @pytest.mark.parametrize("value", ["0", "6", "9", "10"])
    def test_out_of_range_values_fail(self, value: str) -> None:
        with pytest.raises(ParseError, match="invalid score value"):
            parse_score_response(f"Reasoning.\nScore: {value}")

    def test_word_ending_in_score_is_not_a_directive(self) -> None:
        with pytest.raises(ParseError):
            parse_score_response("The underscore: 4 appears here.")

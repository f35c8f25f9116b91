"""Parsing of free-text judge responses into a 1-5 score and rationale."""

import re

from book_rag.core.exceptions import ParseError

MIN_SCORE = 1
MAX_SCORE = 5

# "Score: 4", "score:4", "Score : 4", "**Score**: 4", "__Score:__ **4**"
SCORE_PATTERN = re.compile(
    r"(?<![a-z])[*_]*score[*_]*\s*:\s*[*_]*\s*(\d+)",
    re.IGNORECASE,
)


def parse_score_response(response: str) -> tuple[int, str]:
    """Extract the score directive and the reasoning that precedes it.

    The first directive in the text wins. Values outside 1-5 are rejected,
    never clamped.

    Raises:
        ParseError: if no directive is present or its value is out of range.
    """
    match = SCORE_PATTERN.search(response)
    if match is None:
        raise ParseError(f"could not parse score from response: {response!r}")

    score = int(match.group(1))
    if score < MIN_SCORE or score > MAX_SCORE:
        raise ParseError(f"invalid score value: {match.group(1)}")

    reasoning = response[: match.start()].strip()
    return score, reasoning

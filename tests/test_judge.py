"""Tests for the judge client, critique and four-dimension answer judging."""

import asyncio

import pytest

from book_rag.core.exceptions import ParseError, ServiceError
from book_rag.evals.critique import critique_qa_pair
from book_rag.evals.judge import JudgeClient, Judgment, gather_judgments
from book_rag.evals.rag_judge import judge_answer
from helpers import FakeChatModel, make_pair, prompt_kind, scored


async def _judgment(score: int) -> Judgment:
    return Judgment(score=score, reasoning="ok")


async def _failing(exc: Exception) -> Judgment:
    raise exc


class TestJudgeClient:
    def test_parses_score_and_reasoning(self) -> None:
        judge = JudgeClient(FakeChatModel(lambda _: "Well supported.\nScore: 4"))
        judgment = asyncio.run(judge.judge("prompt"))
        assert judgment == Judgment(score=4, reasoning="Well supported.")

    def test_unparseable_response_raises(self) -> None:
        judge = JudgeClient(FakeChatModel(lambda _: "no directive here"))
        with pytest.raises(ParseError):
            asyncio.run(judge.judge("prompt"))

    def test_issues_exactly_one_call(self) -> None:
        model = FakeChatModel(lambda _: scored(3))
        asyncio.run(JudgeClient(model).judge("prompt"))
        assert model.prompts == ["prompt"]


class TestGatherJudgments:
    def test_returns_every_dimension(self) -> None:
        result = asyncio.run(
            gather_judgments({"a": _judgment(1), "b": _judgment(5)}, kind="critique")
        )
        assert result["a"].score == 1
        assert result["b"].score == 5

    def test_failure_names_the_dimension(self) -> None:
        calls = {
            "groundedness": _judgment(4),
            "relevance": _failing(ParseError("bad")),
            "standalone": _judgment(4),
        }
        with pytest.raises(ParseError, match="relevance critique failed") as exc_info:
            asyncio.run(gather_judgments(calls, kind="critique"))
        assert exc_info.value.dimension == "relevance"

    def test_simultaneous_failures_report_first_declared(self) -> None:
        calls = {
            "faithfulness": _judgment(4),
            "answer_relevance": _failing(ServiceError("timeout")),
            "correctness": _failing(ParseError("bad")),
        }
        with pytest.raises(ServiceError) as exc_info:
            asyncio.run(gather_judgments(calls, kind="evaluation"))
        assert exc_info.value.dimension == "answer_relevance"

    def test_cancellation_cancels_in_flight_calls(self) -> None:
        cancelled: list[str] = []

        async def scenario() -> None:
            started = asyncio.Event()

            async def hang(name: str) -> Judgment:
                started.set()
                try:
                    await asyncio.Event().wait()
                except asyncio.CancelledError:
                    cancelled.append(name)
                    raise
                return Judgment(score=1, reasoning="")

            task = asyncio.create_task(
                gather_judgments({"a": hang("a"), "b": hang("b")}, kind="critique")
            )
            await started.wait()
            await asyncio.sleep(0)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        asyncio.run(scenario())
        assert sorted(cancelled) == ["a", "b"]


class TestCritiqueQAPair:
    def test_scores_all_three_dimensions(self) -> None:
        by_kind = {"groundedness": 5, "relevance": 4, "standalone": 3}
        model = FakeChatModel(lambda p: scored(by_kind[prompt_kind(p)], prompt_kind(p)))
        scores = asyncio.run(critique_qa_pair(JudgeClient(model), make_pair()))

        assert (scores.groundedness, scores.relevance, scores.standalone) == (5, 4, 3)
        assert sorted(model.kinds()) == ["groundedness", "relevance", "standalone"]
        assert scores.reasoning.splitlines() == [
            "Groundedness: groundedness",
            "Relevance: relevance",
            "Standalone: standalone",
        ]

    def test_prompts_embed_only_their_inputs(self) -> None:
        model = FakeChatModel(lambda _: scored(4))
        asyncio.run(critique_qa_pair(JudgeClient(model), make_pair()))
        standalone = next(p for p in model.prompts if prompt_kind(p) == "standalone")
        assert "Who hunts the white whale?" in standalone
        assert "Captain Ahab." not in standalone

    def test_one_failing_dimension_fails_the_critique(self) -> None:
        def respond(prompt: str) -> str | Exception:
            if prompt_kind(prompt) == "standalone":
                return ServiceError("connection reset")
            return scored(5)

        with pytest.raises(ServiceError) as exc_info:
            asyncio.run(critique_qa_pair(JudgeClient(FakeChatModel(respond)), make_pair()))
        assert exc_info.value.dimension == "standalone"


class TestJudgeAnswer:
    def _run(self, model: FakeChatModel):
        return asyncio.run(
            judge_answer(
                JudgeClient(model),
                question="Who hunts the white whale?",
                reference="Captain Ahab.",
                generated="Ahab does.",
                retrieved_context="RETRIEVED-PASSAGE",
            )
        )

    def test_scores_all_four_dimensions(self) -> None:
        by_kind = {
            "faithfulness": 5,
            "answer_relevance": 4,
            "correctness": 3,
            "context_relevance": 2,
        }
        scores = self._run(FakeChatModel(lambda p: scored(by_kind[prompt_kind(p)])))
        assert (
            scores.faithfulness,
            scores.answer_relevance,
            scores.correctness,
            scores.context_relevance,
        ) == (5, 4, 3, 2)
        assert "Context Relevance: Looks fine." in scores.reasoning

    def test_dimension_inputs_are_isolated(self) -> None:
        model = FakeChatModel(lambda _: scored(4))
        self._run(model)
        prompts = {prompt_kind(p): p for p in model.prompts}

        assert "Captain Ahab." not in prompts["faithfulness"]
        assert "RETRIEVED-PASSAGE" not in prompts["correctness"]
        assert "RETRIEVED-PASSAGE" not in prompts["answer_relevance"]
        assert "Captain Ahab." not in prompts["answer_relevance"]
        assert "Ahab does." not in prompts["context_relevance"]

    def test_no_partial_credit(self) -> None:
        def respond(prompt: str) -> str:
            if prompt_kind(prompt) == "correctness":
                return "I cannot decide."
            return scored(5)

        with pytest.raises(ParseError) as exc_info:
            self._run(FakeChatModel(respond))
        assert exc_info.value.dimension == "correctness"

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

from paper_eval.documents.models import DocumentHandle
from paper_eval.evaluation.models import EvaluationMode, EvaluationOutcome
from paper_eval.queue.batch_runner import BatchRunner
from paper_eval.queue.models import Batch, BatchStatus


def _documents(count: int) -> list[DocumentHandle]:
    return [DocumentHandle(path=Path(f"/papers/doc{i}.txt")) for i in range(1, count + 1)]


def _make_runner(
    failing: set[tuple[str, EvaluationMode]] | None = None,
) -> tuple[BatchRunner, MagicMock, MagicMock]:
    """Create a BatchRunner whose evaluator fails for the given (name, mode) pairs."""
    failing = failing or set()

    async def evaluate(document: DocumentHandle, mode: EvaluationMode) -> EvaluationOutcome:
        name = document.display_name
        if (name, mode) in failing:
            return EvaluationOutcome.failed("AI provider network error", filename=name)
        return EvaluationOutcome.succeeded(f"{mode.value} {name}", filename=name)

    mock_evaluator = MagicMock()
    mock_evaluator.evaluate = AsyncMock(side_effect=evaluate)
    mock_synthesizer = MagicMock()
    mock_synthesizer.synthesize = AsyncMock(
        return_value=EvaluationOutcome.succeeded("synthesis")
    )
    return BatchRunner(mock_evaluator, mock_synthesizer), mock_evaluator, mock_synthesizer


class TestSuccessfulBatch:
    def test_evaluates_every_document_in_both_modes(self) -> None:
        runner, mock_evaluator, _synth = _make_runner()
        batch = Batch(documents=_documents(2))

        asyncio.run(runner.run(batch))

        assert batch.status is BatchStatus.COMPLETED
        assert batch.progress == 100
        assert mock_evaluator.evaluate.await_count == 4
        assert [r.document.display_name for r in batch.individual_results] == [
            "doc1.txt",
            "doc2.txt",
        ]
        assert batch.individual_results[1].concise.text == "concise doc2.txt"

    def test_multi_document_batch_synthesizes_once(self) -> None:
        runner, _eval, mock_synthesizer = _make_runner()
        batch = Batch(documents=_documents(2))

        asyncio.run(runner.run(batch))

        mock_synthesizer.synthesize.assert_awaited_once_with(batch.individual_results)
        assert batch.synthesis_result == EvaluationOutcome.succeeded("synthesis")

    def test_single_document_mirrors_detailed_outcome(self) -> None:
        runner, _eval, mock_synthesizer = _make_runner()
        batch = Batch(documents=_documents(1))

        asyncio.run(runner.run(batch))

        mock_synthesizer.synthesize.assert_not_awaited()
        assert batch.synthesis_result is batch.individual_results[0].detailed


class TestDocumentFailures:
    def test_failed_detailed_call_keeps_batch_completed(self) -> None:
        runner, _eval, _synth = _make_runner({("doc2.txt", EvaluationMode.DETAILED)})
        batch = Batch(documents=_documents(3))

        asyncio.run(runner.run(batch))

        assert batch.status is BatchStatus.COMPLETED
        assert len(batch.individual_results) == 3
        assert batch.individual_results[1].detailed.success is False
        assert batch.individual_results[1].concise.success is True
        assert batch.individual_results[2].detailed.success is True


class TestBatchFailure:
    def test_unexpected_error_fails_batch(self) -> None:
        runner, mock_evaluator, _synth = _make_runner()
        mock_evaluator.evaluate.side_effect = RuntimeError("disk on fire")
        batch = Batch(documents=_documents(2))

        asyncio.run(runner.run(batch))

        assert batch.status is BatchStatus.FAILED
        assert batch.error == "disk on fire"

    def test_empty_message_gets_default(self) -> None:
        runner, _eval, mock_synthesizer = _make_runner()
        mock_synthesizer.synthesize.side_effect = RuntimeError()
        batch = Batch(documents=_documents(2))

        asyncio.run(runner.run(batch))

        assert batch.status is BatchStatus.FAILED
        assert batch.error == "Unknown error processing batch"

    def test_progress_reflects_finished_documents(self) -> None:
        runner, _eval, mock_synthesizer = _make_runner()
        mock_synthesizer.synthesize.side_effect = RuntimeError("synthesis crashed")
        batch = Batch(documents=_documents(4))

        asyncio.run(runner.run(batch))

        assert batch.progress == 100
        assert len(batch.individual_results) == 4


class TestModeConcurrency:
    def test_modes_overlap_and_documents_do_not(self) -> None:
        events: list[tuple[str, str, EvaluationMode]] = []

        async def evaluate(document: DocumentHandle, mode: EvaluationMode) -> EvaluationOutcome:
            events.append(("start", document.display_name, mode))
            await asyncio.sleep(0)
            await asyncio.sleep(0)
            events.append(("end", document.display_name, mode))
            return EvaluationOutcome.succeeded(f"{mode.value} {document.display_name}")

        runner, mock_evaluator, _synth = _make_runner()
        mock_evaluator.evaluate.side_effect = evaluate
        batch = Batch(documents=_documents(2))

        asyncio.run(runner.run(batch))

        assert batch.status is BatchStatus.COMPLETED
        assert {event[2] for event in events[:2]} == {
            EvaluationMode.DETAILED,
            EvaluationMode.CONCISE,
        }
        assert all(event[0] == "start" and event[1] == "doc1.txt" for event in events[:2])
        assert all(event[0] == "end" and event[1] == "doc1.txt" for event in events[2:4])
        assert all(event[1] == "doc2.txt" for event in events[4:])

        in_flight = 0
        peak = 0
        for kind, _name, _mode in events:
            in_flight += 1 if kind == "start" else -1
            peak = max(peak, in_flight)
        assert peak == 2

    def test_crashing_mode_cancels_its_sibling(self) -> None:
        cancelled: list[EvaluationMode] = []

        async def evaluate(document: DocumentHandle, mode: EvaluationMode) -> EvaluationOutcome:
            if mode is EvaluationMode.DETAILED:
                await asyncio.sleep(0)
                raise RuntimeError("parser crashed")
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.append(mode)
                raise
            return EvaluationOutcome.succeeded("unreachable")

        runner, mock_evaluator, mock_synthesizer = _make_runner()
        mock_evaluator.evaluate.side_effect = evaluate
        batch = Batch(documents=_documents(2))

        asyncio.run(runner.run(batch))

        assert batch.status is BatchStatus.FAILED
        assert batch.error == "parser crashed"
        assert cancelled == [EvaluationMode.CONCISE]
        assert batch.individual_results == []
        assert mock_evaluator.evaluate.await_count == 2
        mock_synthesizer.synthesize.assert_not_awaited()

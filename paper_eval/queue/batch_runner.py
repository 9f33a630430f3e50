import asyncio

from paper_eval.documents.models import DocumentHandle
from paper_eval.evaluation.evaluator import DocumentEvaluator
from paper_eval.evaluation.models import DocumentResult, EvaluationMode, EvaluationOutcome
from paper_eval.evaluation.synthesizer import Synthesizer
from paper_eval.logging.logger import Log
from paper_eval.queue.models import Batch, BatchStatus

UNKNOWN_BATCH_ERROR = "Unknown error processing batch"


class BatchRunner:
    """Run one batch to a terminal state; never raises."""

    def __init__(self, evaluator: DocumentEvaluator, synthesizer: Synthesizer) -> None:
        self._evaluator = evaluator
        self._synthesizer = synthesizer

    async def run(self, batch: Batch) -> None:
        """Evaluate every document in order, then synthesize.

        Per-document and synthesis failures are recorded in their outcomes;
        anything else fails the whole batch.
        """
        batch.status = BatchStatus.PROCESSING
        Log.info(f"Processing batch {batch.batch_id} with {len(batch.documents)} documents")
        try:
            await self._evaluate_documents(batch)
            await self._synthesize(batch)
            batch.status = BatchStatus.COMPLETED
            Log.info(f"Batch {batch.batch_id} completed")
        except Exception as exc:
            self._handle_failure(batch, exc)

    async def _evaluate_documents(self, batch: Batch) -> None:
        total = len(batch.documents)
        for index, document in enumerate(batch.documents):
            detailed, concise = await self._evaluate_both_modes(document)
            batch.individual_results.append(
                DocumentResult(document=document, detailed=detailed, concise=concise)
            )
            batch.progress = max(batch.progress, round((index + 1) / total * 100))
            Log.info(
                f"Batch {batch.batch_id}: {document.display_name} done "
                f"(detailed={detailed.success}, concise={concise.success}, "
                f"{batch.progress}%)"
            )

    async def _evaluate_both_modes(
        self, document: DocumentHandle
    ) -> tuple[EvaluationOutcome, EvaluationOutcome]:
        """Run both modes concurrently; an unexpected error cancels the sibling."""
        try:
            async with asyncio.TaskGroup() as group:
                detailed = group.create_task(
                    self._evaluator.evaluate(document, EvaluationMode.DETAILED)
                )
                concise = group.create_task(
                    self._evaluator.evaluate(document, EvaluationMode.CONCISE)
                )
        except ExceptionGroup as errors:
            raise errors.exceptions[0] from None
        return detailed.result(), concise.result()

    async def _synthesize(self, batch: Batch) -> None:
        if len(batch.documents) > 1:
            batch.synthesis_result = await self._synthesizer.synthesize(
                batch.individual_results
            )
        elif batch.individual_results:
            batch.synthesis_result = batch.individual_results[0].detailed

    def _handle_failure(self, batch: Batch, exc: Exception) -> None:
        batch.status = BatchStatus.FAILED
        batch.error = str(exc) or UNKNOWN_BATCH_ERROR
        Log.error(f"Batch {batch.batch_id} failed: {batch.error}")

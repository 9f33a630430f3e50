import asyncio
from collections import deque

from paper_eval.citations.normalizer import CitationNormalizer
from paper_eval.config.settings import Settings
from paper_eval.documents.loader import DocumentLoader
from paper_eval.documents.models import DocumentHandle
from paper_eval.evaluation.evaluator import DocumentEvaluator
from paper_eval.evaluation.factory import EvaluationClientFactory
from paper_eval.evaluation.synthesizer import Synthesizer
from paper_eval.logging.logger import Log
from paper_eval.pdf.factory import PdfExtractorFactory
from paper_eval.queue.batch_runner import UNKNOWN_BATCH_ERROR, BatchRunner
from paper_eval.queue.models import (
    Batch,
    BatchResult,
    BatchStatus,
    BatchStatusSnapshot,
)


class EvaluationQueue:
    """FIFO of batches drained one at a time on the running event loop.

    Batches stay in ``_pending`` while queued or processing and move to
    ``_completed`` once terminal. A completed batch leaves the store the
    first time its result is fetched.
    """

    def __init__(self, runner: BatchRunner) -> None:
        self._runner = runner
        self._pending: deque[Batch] = deque()
        self._completed: dict[str, Batch] = {}
        self._drain_task: asyncio.Task[None] | None = None

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def is_draining(self) -> bool:
        return self._drain_task is not None and not self._drain_task.done()

    def enqueue(self, documents: list[DocumentHandle]) -> str:
        """Queue *documents* as one batch and return its id.

        Must be called from a coroutine or callback on the running loop.
        """
        loop = asyncio.get_running_loop()
        batch = Batch(documents=list(documents))
        self._pending.append(batch)
        Log.info(
            f"Enqueued batch {batch.batch_id} ({len(batch.documents)} documents, "
            f"{self.pending_count} in queue)"
        )
        if not self.is_draining:
            self._drain_task = loop.create_task(self._drain())
        return batch.batch_id

    def get_status(self, batch_id: str) -> BatchStatusSnapshot | None:
        batch = self._find(batch_id)
        return BatchStatusSnapshot.of(batch) if batch else None

    def get_result(self, batch_id: str) -> BatchResult | None:
        """Return a completed batch's results and forget the batch."""
        batch = self._completed.get(batch_id)
        if batch is None or batch.status is not BatchStatus.COMPLETED:
            return None
        del self._completed[batch_id]
        Log.debug(f"Batch {batch_id} result fetched and purged")
        return BatchResult.of(batch)

    def discard(self, batch_id: str) -> bool:
        """Forget a terminal batch without fetching its result."""
        batch = self._completed.get(batch_id)
        if batch is None or not batch.status.is_terminal:
            return False
        del self._completed[batch_id]
        Log.debug(f"Batch {batch_id} discarded ({batch.status.value})")
        return True

    async def join(self) -> None:
        """Wait until every queued batch is terminal."""
        while self._drain_task is not None:
            await self._drain_task

    def _find(self, batch_id: str) -> Batch | None:
        for batch in self._pending:
            if batch.batch_id == batch_id:
                return batch
        return self._completed.get(batch_id)

    async def _drain(self) -> None:
        Log.debug("Queue drain started")
        try:
            while self._pending:
                batch = self._pending[0]
                try:
                    await self._runner.run(batch)
                except Exception as exc:
                    Log.exception(f"Unexpected error draining batch {batch.batch_id}")
                    batch.status = BatchStatus.FAILED
                    batch.error = str(exc) or UNKNOWN_BATCH_ERROR
                self._pending.popleft()
                self._completed[batch.batch_id] = batch
        finally:
            self._drain_task = None
            Log.debug("Queue drained, idling")


def build_queue(settings: Settings) -> EvaluationQueue:
    """Build an EvaluationQueue with all required adapters."""
    pdf_extractor = PdfExtractorFactory.create(settings)
    loader = DocumentLoader(pdf_extractor)
    normalizer = CitationNormalizer(
        resolver_base_url=settings.citation_resolver_base_url,
        label=settings.citation_label,
    )
    chat_model = EvaluationClientFactory.create(settings)
    evaluator = DocumentEvaluator(
        chat_model=chat_model,
        loader=loader,
        normalizer=normalizer,
        resolver_base_url=settings.citation_resolver_base_url,
        label=settings.citation_label,
    )
    synthesizer = Synthesizer(
        chat_model=chat_model,
        normalizer=normalizer,
        resolver_base_url=settings.citation_resolver_base_url,
        label=settings.citation_label,
    )
    return EvaluationQueue(BatchRunner(evaluator, synthesizer))

import asyncio

from paper_eval.documents.models import DocumentHandle
from paper_eval.evaluation.models import EvaluationOutcome
from paper_eval.logging.logger import Log
from paper_eval.queue.evaluation_queue import EvaluationQueue
from paper_eval.queue.exceptions import (
    BatchFailedError,
    BatchNotFoundError,
    BatchTimeoutError,
)
from paper_eval.queue.models import BatchStatus

DEFAULT_POLL_INTERVAL_SECONDS = 1.0
DEFAULT_MAX_WAIT_SECONDS = 300.0


async def wait_for_result(
    queue: EvaluationQueue,
    batch_id: str,
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
    max_wait: float = DEFAULT_MAX_WAIT_SECONDS,
) -> EvaluationOutcome:
    """Poll *batch_id* until it is terminal and return its headline outcome.

    The headline outcome is the synthesis, or the first document's detailed
    outcome when the batch produced no synthesis. On timeout the batch keeps
    draining and can still be fetched later. A failed batch is discarded
    before ``BatchFailedError`` is raised.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + max_wait
    while True:
        status = queue.get_status(batch_id)
        if status is None:
            raise BatchNotFoundError(f"Batch not found: {batch_id}")
        if status.status is BatchStatus.FAILED:
            queue.discard(batch_id)
            raise BatchFailedError(status.error or f"Batch {batch_id} failed")
        if status.status.is_terminal:
            break
        if loop.time() >= deadline:
            raise BatchTimeoutError(
                f"Batch {batch_id} did not complete within {max_wait:g}s "
                f"(status={status.status.value}, progress={status.progress}%)"
            )
        await asyncio.sleep(poll_interval)

    result = queue.get_result(batch_id)
    if result is None:
        raise BatchNotFoundError(f"Batch result already fetched: {batch_id}")
    if result.synthesis_result is not None:
        return result.synthesis_result
    if result.individual_results:
        return result.individual_results[0].detailed
    return EvaluationOutcome.failed(f"Batch {batch_id} produced no results")


async def compare_documents(
    queue: EvaluationQueue,
    documents: list[DocumentHandle],
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
    max_wait: float = DEFAULT_MAX_WAIT_SECONDS,
) -> EvaluationOutcome:
    """Enqueue *documents* as one batch and wait for its outcome."""
    batch_id = queue.enqueue(documents)
    Log.info(f"Waiting for batch {batch_id} (max {max_wait:g}s)")
    return await wait_for_result(queue, batch_id, poll_interval, max_wait)

from paper_eval.queue.batch_runner import BatchRunner
from paper_eval.queue.evaluation_queue import EvaluationQueue, build_queue
from paper_eval.queue.waiter import compare_documents, wait_for_result

__all__ = [
    "BatchRunner",
    "EvaluationQueue",
    "build_queue",
    "compare_documents",
    "wait_for_result",
]

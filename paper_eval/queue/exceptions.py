class QueueError(Exception):
    """Base exception for evaluation queue lookups."""


class BatchNotFoundError(QueueError):
    """Raised when a batch id is unknown (never enqueued or already fetched)."""


class BatchFailedError(QueueError):
    """Raised when a waited-on batch ends in the failed state."""


class BatchTimeoutError(QueueError):
    """Raised when a bounded wait gives up before the batch completes."""

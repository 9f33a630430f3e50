import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from paper_eval.documents.models import DocumentHandle
from paper_eval.evaluation.models import DocumentResult, EvaluationOutcome


class BatchStatus(str, Enum):
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (BatchStatus.COMPLETED, BatchStatus.FAILED)


def new_batch_id() -> str:
    """Submission time in milliseconds plus a random suffix."""
    return f"batch-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


@dataclass
class Batch:
    """Documents submitted together; mutated only by the drain loop."""

    documents: list[DocumentHandle]
    batch_id: str = field(default_factory=new_batch_id)
    status: BatchStatus = BatchStatus.QUEUED
    progress: int = 0
    individual_results: list[DocumentResult] = field(default_factory=list)
    synthesis_result: EvaluationOutcome | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    error: str | None = None


@dataclass(frozen=True)
class BatchStatusSnapshot:
    batch_id: str
    status: BatchStatus
    progress: int
    document_count: int
    completed_count: int
    created_at: datetime
    error: str | None = None

    @classmethod
    def of(cls, batch: Batch) -> "BatchStatusSnapshot":
        return cls(
            batch_id=batch.batch_id,
            status=batch.status,
            progress=batch.progress,
            document_count=len(batch.documents),
            completed_count=len(batch.individual_results),
            created_at=batch.created_at,
            error=batch.error,
        )


@dataclass(frozen=True)
class BatchResult:
    batch_id: str
    individual_results: list[DocumentResult]
    synthesis_result: EvaluationOutcome | None
    created_at: datetime

    @classmethod
    def of(cls, batch: Batch) -> "BatchResult":
        return cls(
            batch_id=batch.batch_id,
            individual_results=list(batch.individual_results),
            synthesis_result=batch.synthesis_result,
            created_at=batch.created_at,
        )

from dataclasses import dataclass
from enum import Enum

from paper_eval.documents.models import DocumentHandle
from paper_eval.evaluation.client_base import BaseEvaluationClient


class EvaluationMode(str, Enum):
    """Evaluation depth requested for a document."""

    DETAILED = "detailed"
    CONCISE = "concise"


@dataclass(frozen=True)
class EvaluationOutcome:
    """Result of one evaluation or synthesis call.

    ``text`` is set when ``success`` is true, ``error`` otherwise.
    """

    success: bool
    text: str | None = None
    error: str | None = None
    filename: str | None = None

    @classmethod
    def succeeded(cls, text: str, filename: str | None = None) -> "EvaluationOutcome":
        return cls(success=True, text=text, filename=filename)

    @classmethod
    def failed(cls, error: str, filename: str | None = None) -> "EvaluationOutcome":
        return cls(success=False, error=error, filename=filename)


@dataclass(frozen=True)
class ChatModel:
    """A configured client together with the model name and sampling temperature."""

    client: BaseEvaluationClient
    model: str
    temperature: float = 0.2


@dataclass(frozen=True)
class DocumentResult:
    """Both evaluation outcomes for one document of a batch."""

    document: DocumentHandle
    detailed: EvaluationOutcome
    concise: EvaluationOutcome

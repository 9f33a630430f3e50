class EvaluationError(Exception):
    """Raised when the language model cannot produce an evaluation."""


class EvaluationNetworkError(EvaluationError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""

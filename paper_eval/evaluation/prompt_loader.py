from pathlib import Path

from paper_eval.evaluation.exceptions import EvaluationError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(name: str, path: Path | None = None) -> str:
    """Load an evaluation prompt template.

    Args:
        name: Bundled template name without extension
              (``detailed``, ``concise`` or ``synthesis``).
        path: Explicit template file, overriding the bundled one.

    Returns:
        The raw template string with ``str.format`` placeholders.

    Raises:
        EvaluationError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / f"{name}_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise EvaluationError(f"Failed to load prompt template: {exc}") from exc


def load_guidelines(path: Path | None = None) -> str:
    """Load the evidence-level grading guidelines embedded in every prompt.

    Raises:
        EvaluationError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "evidence_guidelines.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise EvaluationError(f"Failed to load evidence guidelines: {exc}") from exc

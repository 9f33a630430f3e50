"""Single-document evaluation against the language model."""

from pathlib import Path

from paper_eval.citations.normalizer import CitationNormalizer
from paper_eval.documents.exceptions import DocumentError
from paper_eval.documents.loader import DocumentLoader
from paper_eval.documents.models import DocumentHandle, LoadedDocument
from paper_eval.evaluation.exceptions import EvaluationError
from paper_eval.evaluation.models import ChatModel, EvaluationMode, EvaluationOutcome
from paper_eval.evaluation.prompt_loader import load_guidelines, load_prompt_template
from paper_eval.logging.logger import Log

SYSTEM_PROMPT = (
    "You are an academic research paper evaluator focused on extracting and "
    "evaluating key findings according to evidence quality guidelines. Always "
    "format source references as clickable markdown links and link every "
    "available DOI as [{label}: DOI_NUMBER]({resolver_base_url}/DOI_NUMBER)."
)

_NONE_DETECTED = "None detected"
_NOT_FOUND = "Not found"


class DocumentEvaluator:
    """Runs one document through the model in detailed or concise mode.

    Safe to call concurrently: nothing but the model call is awaited and no
    shared state is mutated.
    """

    def __init__(
        self,
        *,
        chat_model: ChatModel,
        loader: DocumentLoader,
        normalizer: CitationNormalizer,
        resolver_base_url: str = "https://doi.org",
        label: str = "doi",
        prompt_dir: Path | None = None,
    ) -> None:
        self._chat_model = chat_model
        self._loader = loader
        self._normalizer = normalizer
        self._resolver_base_url = resolver_base_url.rstrip("/")
        self._label = label
        self._guidelines = load_guidelines(
            prompt_dir / "evidence_guidelines.txt" if prompt_dir else None
        )
        self._templates = {
            mode: load_prompt_template(
                mode.value,
                prompt_dir / f"{mode.value}_prompt.txt" if prompt_dir else None,
            )
            for mode in EvaluationMode
        }

    async def evaluate(
        self, document: DocumentHandle, mode: EvaluationMode
    ) -> EvaluationOutcome:
        """Evaluate *document*; provider and read failures become failed outcomes."""
        filename = document.display_name
        try:
            loaded = self._loader.load(document)
            prompt = self._build_prompt(loaded, mode)
            Log.debug(f"{mode.value} prompt for {filename}:\n{prompt}")

            raw_text = await self._chat_model.client.create_chat_completion(
                model=self._chat_model.model,
                temperature=self._chat_model.temperature,
                system_prompt=self._system_prompt(),
                user_prompt=prompt,
            )
        except (DocumentError, EvaluationError) as exc:
            Log.error(f"{mode.value} evaluation of {filename} failed: {exc}")
            return EvaluationOutcome.failed(
                str(exc) or "Error evaluating document", filename=filename
            )

        text = self._normalizer.normalize(raw_text, loaded.metadata.dois)
        Log.info(f"{mode.value} evaluation of {filename} complete ({len(text)} chars)")
        return EvaluationOutcome.succeeded(text, filename=filename)

    def _system_prompt(self) -> str:
        return SYSTEM_PROMPT.format(
            label=self._label, resolver_base_url=self._resolver_base_url
        )

    def _build_prompt(self, document: LoadedDocument, mode: EvaluationMode) -> str:
        metadata = document.metadata
        return self._templates[mode].format(
            guidelines=self._guidelines,
            label=self._label,
            resolver_base_url=self._resolver_base_url,
            filename=document.filename,
            title=metadata.title or "Unknown",
            year=metadata.publication_year or _NOT_FOUND,
            abstract=metadata.abstract or _NOT_FOUND,
            dois=", ".join(metadata.dois) or _NONE_DETECTED,
            urls=", ".join(metadata.urls) or _NONE_DETECTED,
            content=document.content,
        )

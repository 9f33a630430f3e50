"""Cross-document synthesis of concise evaluations."""

import re
from pathlib import Path

from paper_eval.citations.normalizer import CitationNormalizer
from paper_eval.documents.metadata import clean_doi
from paper_eval.evaluation.exceptions import EvaluationError
from paper_eval.evaluation.models import ChatModel, DocumentResult, EvaluationOutcome
from paper_eval.evaluation.prompt_loader import load_guidelines, load_prompt_template
from paper_eval.logging.logger import Log

SYSTEM_PROMPT = (
    "You are an expert academic evaluator synthesizing evaluations of multiple "
    "research papers according to evidence quality guidelines. Always format "
    "DOI references as clickable links using the format "
    "[{label}: DOI_NUMBER]({resolver_base_url}/DOI_NUMBER)."
)
NO_SUCCESSFUL_EVALUATIONS = "Failed to evaluate any of the documents"

_MENTIONED_DOI_RE = re.compile(r"doi:\s*(10\.\d{4,}/[^\s)\]]+)", re.IGNORECASE)
_EVALUATION_SEPARATOR = "\n---\n"


class Synthesizer:
    """Merges the successful concise evaluations of a batch into one narrative."""

    def __init__(
        self,
        *,
        chat_model: ChatModel,
        normalizer: CitationNormalizer,
        resolver_base_url: str = "https://doi.org",
        label: str = "doi",
        prompt_dir: Path | None = None,
    ) -> None:
        self._chat_model = chat_model
        self._normalizer = normalizer
        self._resolver_base_url = resolver_base_url.rstrip("/")
        self._label = label
        self._guidelines = load_guidelines(
            prompt_dir / "evidence_guidelines.txt" if prompt_dir else None
        )
        self._template = load_prompt_template(
            "synthesis", prompt_dir / "synthesis_prompt.txt" if prompt_dir else None
        )

    async def synthesize(self, results: list[DocumentResult]) -> EvaluationOutcome:
        """Synthesize the documents whose concise evaluation succeeded.

        Failed documents are skipped. With nothing left the client is not
        called and a failed outcome is returned.
        """
        successful = [r for r in results if r.concise.success and r.concise.text]
        if not successful:
            Log.warning("Synthesis skipped: no successful concise evaluations")
            return EvaluationOutcome.failed(NO_SUCCESSFUL_EVALUATIONS)

        dois = self.mentioned_dois([r.concise.text or "" for r in successful])
        prompt = self._build_prompt(successful, dois)
        Log.debug(f"Synthesis prompt:\n{prompt}")
        try:
            raw_text = await self._chat_model.client.create_chat_completion(
                model=self._chat_model.model,
                temperature=self._chat_model.temperature,
                system_prompt=SYSTEM_PROMPT.format(
                    label=self._label, resolver_base_url=self._resolver_base_url
                ),
                user_prompt=prompt,
            )
        except EvaluationError as exc:
            Log.error(f"Synthesis of {len(successful)} documents failed: {exc}")
            return EvaluationOutcome.failed(str(exc) or "Error synthesizing evaluations")

        text = self._normalizer.normalize(raw_text, dois)
        Log.info(f"Synthesized {len(successful)} documents ({len(text)} chars)")
        return EvaluationOutcome.succeeded(text)

    @staticmethod
    def mentioned_dois(texts: list[str]) -> list[str]:
        """DOIs cited as ``doi: X`` across *texts*, deduplicated in order."""
        dois: list[str] = []
        for text in texts:
            for match in _MENTIONED_DOI_RE.finditer(text):
                doi = clean_doi(match.group(1))
                if doi and doi not in dois:
                    dois.append(doi)
        return dois

    def _build_prompt(self, results: list[DocumentResult], dois: list[str]) -> str:
        evaluations = _EVALUATION_SEPARATOR.join(
            f"\nPAPER {index}: {result.document.display_name}\n{result.concise.text}\n"
            for index, result in enumerate(results, start=1)
        )
        return self._template.format(
            guidelines=self._guidelines,
            label=self._label,
            resolver_base_url=self._resolver_base_url,
            dois=", ".join(dois) or "None detected",
            evaluations=evaluations,
        )

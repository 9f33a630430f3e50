import re
from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    _BLANK_RUN_RE = re.compile(r"\n[ \t]*(?:\n[ \t]*){2,}")

    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> str:
        """Extract plain text from PDF bytes.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            Page texts joined with blank lines, runs of empty lines collapsed.

        Raises:
            PdfExtractionError: if extraction fails for any reason.
        """

    @classmethod
    def _join_pages(cls, pages: list[str]) -> str:
        # Paragraph splitting downstream relies on a single blank line between pages.
        joined = "\n\n".join(page.strip() for page in pages if page.strip())
        return cls._BLANK_RUN_RE.sub("\n\n", joined).strip()

from paper_eval.documents.exceptions import DocumentReadError
from paper_eval.documents.metadata import extract_metadata
from paper_eval.documents.models import DocumentHandle, LoadedDocument
from paper_eval.logging.logger import Log
from paper_eval.pdf.base import BasePdfExtractor
from paper_eval.pdf.exceptions import PdfExtractionError


class DocumentLoader:
    """Reads a document handle from disk and turns it into prompt-ready text."""

    TEXT_EXTENSIONS = frozenset({".txt", ".md", ".rtf"})

    def __init__(self, pdf_extractor: BasePdfExtractor) -> None:
        self._pdf_extractor = pdf_extractor

    def load(self, document: DocumentHandle) -> LoadedDocument:
        """Read the document and scrape its metadata.

        Raises:
            DocumentReadError: if the file is missing or cannot be converted.
        """
        raw_bytes = self._read_bytes(document)
        extension = document.path.suffix.lower()
        if extension == ".pdf":
            content = self._extract_pdf(document, raw_bytes)
        else:
            if extension not in self.TEXT_EXTENSIONS:
                Log.warning(
                    f"Unsupported file type '{extension}' for {document.display_name}, "
                    "reading as text"
                )
            content = raw_bytes.decode("utf-8", errors="replace")

        metadata = extract_metadata(content, document.display_name)
        Log.info(
            f"Loaded {document.display_name}: {len(content)} chars, "
            f"{len(metadata.dois)} DOIs"
        )
        return LoadedDocument(
            filename=document.display_name,
            content=content,
            metadata=metadata,
        )

    @staticmethod
    def _read_bytes(document: DocumentHandle) -> bytes:
        if not document.path.is_file():
            raise DocumentReadError(f"File not found: {document.path}")
        try:
            return document.path.read_bytes()
        except OSError as exc:
            raise DocumentReadError(
                f"Failed to read {document.display_name}: {exc}"
            ) from exc

    def _extract_pdf(self, document: DocumentHandle, raw_bytes: bytes) -> str:
        try:
            return self._pdf_extractor.extract(raw_bytes)
        except PdfExtractionError as exc:
            raise DocumentReadError(
                f"Failed to extract content from {document.display_name}: {exc}"
            ) from exc

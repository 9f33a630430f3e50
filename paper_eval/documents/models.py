from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class DocumentHandle:
    """Opaque reference to an uploaded document waiting for evaluation."""

    path: Path
    filename: str = ""

    @classmethod
    def from_path(cls, path: str | Path) -> "DocumentHandle":
        resolved = Path(path)
        return cls(path=resolved, filename=resolved.name)

    @property
    def display_name(self) -> str:
        return self.filename or self.path.name


@dataclass(frozen=True)
class DocumentMetadata:
    """Bibliographic hints scraped from the document text."""

    filename: str
    dois: list[str] = field(default_factory=list)
    urls: list[str] = field(default_factory=list)
    title: str | None = None
    abstract: str | None = None
    publication_year: int | None = None


@dataclass(frozen=True)
class LoadedDocument:
    """Document text plus metadata, ready to be rendered into a prompt."""

    filename: str
    content: str
    metadata: DocumentMetadata

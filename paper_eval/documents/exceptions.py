class DocumentError(Exception):
    """Base exception for document loading failures."""


class DocumentReadError(DocumentError):
    """Raised when a document cannot be read or converted to text."""

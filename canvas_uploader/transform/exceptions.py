class TransformError(Exception):
    """Base exception for all document transformation errors."""


class DocumentNotFoundError(TransformError):
    """Raised when the requested document is outside the root or missing."""


class DocumentParseError(TransformError):
    """Raised when the document cannot be decoded, parsed or inlined."""

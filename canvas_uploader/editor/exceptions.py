class EditorError(Exception):
    """Raised when the editor rejects new content."""


class EditorUnavailableError(EditorError):
    """Raised when no editor is reachable to receive the fragment."""

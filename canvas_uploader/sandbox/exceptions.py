class PathEscapeError(Exception):
    """Raised when a path resolves outside the sandbox root."""

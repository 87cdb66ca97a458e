class LocalServerError(Exception):
    """Raised when the local transformation server cannot serve a request."""

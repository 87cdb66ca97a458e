class UploadError(Exception):
    """Base exception for failures confined to a single asset upload."""


class UploadPhaseFailure(UploadError):
    """Raised when a protocol phase answers with a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: object = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class NoUsableUrlError(UploadError):
    """Raised when the final file record carries none of the known URL fields."""


class AssetFetchError(UploadError):
    """Raised when the local server cannot deliver an asset's bytes."""


class DestinationNotFoundError(Exception):
    """Raised when no destination (course) id can be discovered."""

from dataclasses import dataclass, field
from enum import Enum


class UploadState(str, Enum):
    PREFLIGHT = "preflight"
    BINARY_UPLOAD = "binary_upload"
    FINALIZE = "finalize"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (UploadState.DONE, UploadState.FAILED)


@dataclass(frozen=True)
class UploadTarget:
    destination_id: str
    folder: str = ""


@dataclass(frozen=True)
class AssetPayload:
    content: bytes
    content_type: str = "application/octet-stream"


@dataclass(frozen=True)
class UploadAsset:
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class PreflightGrant:
    """Where and how to send the bytes, as returned by the preflight call."""

    upload_url: str
    upload_params: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class UploadFailure:
    phase: UploadState
    message: str
    status_code: int | None = None
    body: object = None


@dataclass(frozen=True)
class UploadResult:
    """Terminal outcome for one asset: a hosted URL or a failure, never both."""

    url: str | None = None
    failure: UploadFailure | None = None

    @property
    def ok(self) -> bool:
        return self.url is not None

    @classmethod
    def success(cls, url: str) -> "UploadResult":
        return cls(url=url)

    @classmethod
    def failed(cls, failure: UploadFailure) -> "UploadResult":
        return cls(failure=failure)


@dataclass
class UploadBatchResult:
    updated_fragment: str
    converted: int = 0
    total: int = 0

import re
from dataclasses import dataclass
from enum import Enum
from urllib.parse import unquote

_REMOTE_RE = re.compile(r"^(https?:)?//", re.IGNORECASE)
_EMBEDDED_RE = re.compile(r"^(data|blob):", re.IGNORECASE)


class ReferenceKind(str, Enum):
    LOCAL = "local"
    REMOTE = "remote"
    EMBEDDED = "embedded"


@dataclass(frozen=True)
class ImageReference:
    """A resource reference found in markup, classified by where it lives."""

    src: str
    kind: ReferenceKind

    @property
    def is_local(self) -> bool:
        return self.kind is ReferenceKind.LOCAL

    @property
    def path(self) -> str:
        """Filesystem path of a local reference, without query or fragment."""
        return local_path(self.src)


def is_remote_url(value: str) -> bool:
    return bool(_REMOTE_RE.match(value.strip()))


def classify_reference(src: str | None) -> ImageReference | None:
    """Classify a ``src``/``href`` value; returns None for empty values."""
    value = (src or "").strip()
    if not value:
        return None
    if _EMBEDDED_RE.match(value):
        return ImageReference(value, ReferenceKind.EMBEDDED)
    if is_remote_url(value):
        return ImageReference(value, ReferenceKind.REMOTE)
    return ImageReference(value, ReferenceKind.LOCAL)


def local_path(reference: str) -> str:
    path_part = reference.strip().split("#", 1)[0].split("?", 1)[0]
    return unquote(path_part)

import time
from collections.abc import Callable
from pathlib import PurePosixPath

from canvas_uploader.transform.references import local_path

DEFAULT_STEM = "image"
DEFAULT_EXTENSION = "png"


class UploadFilenameFactory:
    """Builds ``<stem>_<millis>.<ext>`` names that never repeat within a run."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last_stamp = 0

    def build(self, src: str) -> str:
        name = PurePosixPath(local_path(src)).name or DEFAULT_STEM
        suffix = PurePosixPath(name).suffix
        stem = name[: -len(suffix)] if suffix else name
        extension = suffix[1:] or DEFAULT_EXTENSION
        return f"{stem or DEFAULT_STEM}_{self._next_stamp()}.{extension}"

    def _next_stamp(self) -> int:
        stamp = int(self._clock() * 1000)
        if stamp <= self._last_stamp:
            stamp = self._last_stamp + 1
        self._last_stamp = stamp
        return stamp

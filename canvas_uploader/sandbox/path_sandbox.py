import os
from pathlib import Path

from canvas_uploader.sandbox.exceptions import PathEscapeError


class PathSandbox:
    """Resolves relative paths against a fixed root and refuses to leave it."""

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, relative_path: str) -> Path:
        """Resolve a root-relative path.

        Raises:
            PathEscapeError: if the result is neither the root nor below it.
        """
        return self.resolve_from(self._root, relative_path)

    def resolve_from(self, base_dir: Path, relative_path: str) -> Path:
        """Resolve a path relative to ``base_dir`` and re-check it against the root.

        Raises:
            PathEscapeError: if the result is neither the root nor below it.
        """
        if "\x00" in relative_path:
            raise PathEscapeError(f"Invalid path: {relative_path!r}")
        try:
            resolved = (Path(base_dir) / relative_path).resolve()
        except (OSError, ValueError) as exc:
            raise PathEscapeError(f"Invalid path: {relative_path!r}") from exc
        if not self.contains(resolved):
            raise PathEscapeError(f"Path escapes root: {relative_path!r}")
        return resolved

    def contains(self, path: Path) -> bool:
        # Compare with a trailing separator so "/root-evil" is not inside "/root".
        if path == self._root:
            return True
        prefix = str(self._root).rstrip(os.sep) + os.sep
        return str(path).startswith(prefix)

    def relative(self, path: Path) -> str:
        """Return ``path`` as a POSIX-style root-relative string."""
        return path.relative_to(self._root).as_posix()


def resolve_under_root(root: Path | str, relative_path: str) -> Path:
    """Shortcut for one-off resolution against ``root``."""
    return PathSandbox(root).resolve(relative_path)

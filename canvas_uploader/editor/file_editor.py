from pathlib import Path

from canvas_uploader.editor.base import BaseEditor
from canvas_uploader.editor.exceptions import EditorError
from canvas_uploader.logging.logger import Log


class FileEditor(BaseEditor):
    """Writes the fragment to a local file, ready to paste into an HTML view."""

    def __init__(self, output_path: Path) -> None:
        self._output_path = output_path

    def is_available(self) -> bool:
        return self._output_path.parent.is_dir()

    def focus(self) -> None:
        Log.debug(f"Writing fragment to {self._output_path}")

    def set_content(self, html: str) -> None:
        self._write(html)

    def insert_content(self, html: str) -> None:
        existing = ""
        if self._output_path.is_file():
            existing = self._output_path.read_text(encoding="utf-8")
        self._write(existing + html)

    def _write(self, html: str) -> None:
        try:
            self._output_path.write_text(html, encoding="utf-8")
        except OSError as exc:
            raise EditorError(f"Cannot write {self._output_path}: {exc}") from exc

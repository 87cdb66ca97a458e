import httpx

from canvas_uploader.config.settings import Settings
from canvas_uploader.editor.base import BaseEditor
from canvas_uploader.editor.canvas_page_editor import CanvasPageEditor, page_slug_from_url
from canvas_uploader.editor.file_editor import FileEditor
from canvas_uploader.upload.credentials import BaseCredentialProvider


class EditorFactory:
    """Creates the configured editor adapter."""

    EDITORS = ("canvas_page", "file")

    @classmethod
    def create(
        cls,
        settings: Settings,
        client: httpx.Client,
        credentials: BaseCredentialProvider,
        course_id: str,
    ) -> BaseEditor:
        editor = settings.editor.lower()
        if editor == "file":
            return FileEditor(settings.editor_output_path)
        if editor == "canvas_page":
            return CanvasPageEditor(
                client=client,
                credentials=credentials,
                course_id=course_id,
                page_slug=page_slug_from_url(settings.canvas_page_url),
            )
        raise ValueError(f"Unknown editor '{editor}'. Choose from: {list(cls.EDITORS)}")

from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import urlsplit

import httpx

from canvas_uploader.client.local_server import LocalServerClient
from canvas_uploader.config.settings import Settings
from canvas_uploader.editor.base import BaseEditor
from canvas_uploader.editor.exceptions import EditorUnavailableError
from canvas_uploader.editor.factory import EditorFactory
from canvas_uploader.logging.logger import Log
from canvas_uploader.upload.credentials import AmbientCredentialProvider, host_page_loader
from canvas_uploader.upload.destination import discover_destination_id
from canvas_uploader.upload.orchestrator import UploadOrchestrator
from canvas_uploader.upload.protocol import AssetUploadProtocol


class InsertMode(str, Enum):
    REPLACE = "replace"
    INSERT = "insert"

    @classmethod
    def parse(cls, value: str | None) -> "InsertMode":
        """Anything other than ``insert``/``i`` means replace."""
        normalized = (value or "").strip().lower()
        if normalized in ("insert", "i"):
            return cls.INSERT
        return cls.REPLACE


@dataclass
class PushReport:
    file: str
    mode: InsertMode
    converted: int = 0
    total: int = 0
    warnings: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        message = f"Upload complete. Mode: {self.mode.value}"
        if self.total:
            message += f"; images uploaded: {self.converted}/{self.total}"
        return message


class DocumentPusher:
    """Fetches a transformed document, uploads its images and hands it to the editor."""

    def __init__(
        self,
        server: LocalServerClient,
        orchestrator: UploadOrchestrator,
        editor: BaseEditor,
        destination_id: str,
    ) -> None:
        self._server = server
        self._orchestrator = orchestrator
        self._editor = editor
        self._destination_id = destination_id

    def push(self, file: str, mode: InsertMode, folder: str) -> PushReport:
        """Run the whole flow for one document.

        Raises:
            LocalServerError: if the document cannot be fetched or transformed.
            EditorUnavailableError: if the editor cannot receive content.
            EditorError: if the editor rejects the final fragment.
        """
        Log.info(f"Fetching processed content for {file}")
        content = self._server.fetch_content(file)
        if content.warnings:
            Log.warning(f"Warnings: {content.warnings}")

        if not self._editor.is_available():
            raise EditorUnavailableError(
                "Editor not detected. Open the page for editing and check the settings."
            )

        Log.info("Uploading images")
        batch = self._orchestrator.upload_images(
            content.body_html,
            file,
            self._destination_id,
            folder,
        )

        self._editor.focus()
        if mode is InsertMode.INSERT:
            self._editor.insert_content(batch.updated_fragment)
        else:
            self._editor.set_content(batch.updated_fragment)

        return PushReport(
            file=file,
            mode=mode,
            converted=batch.converted,
            total=batch.total,
            warnings=list(content.warnings),
        )


def resolve_canvas_base_url(settings: Settings) -> str:
    if settings.canvas_base_url:
        return settings.canvas_base_url.rstrip("/")
    parts = urlsplit(settings.canvas_page_url)
    if parts.scheme and parts.netloc:
        return f"{parts.scheme}://{parts.netloc}"
    raise ValueError("Set CANVAS_BASE_URL or CANVAS_PAGE_URL to reach Canvas")


def build_pusher(
    settings: Settings,
    server_http: httpx.Client,
    canvas_http: httpx.Client,
    storage_http: httpx.Client,
) -> DocumentPusher:
    """Wire a DocumentPusher from settings and caller-owned HTTP clients.

    ``canvas_http`` must have the Canvas origin as its base URL.

    Raises:
        DestinationNotFoundError: if no course id can be discovered.
    """
    destination_id = discover_destination_id(
        settings.canvas_page_url, settings.canvas_course_id
    )
    credentials = AmbientCredentialProvider(
        session_cookie=settings.canvas_session_cookie,
        configured_token=settings.canvas_csrf_token,
        page_html_loader=host_page_loader(
            canvas_http, settings.canvas_page_url, settings.canvas_session_cookie
        ),
    )
    server = LocalServerClient(server_http)
    protocol = AssetUploadProtocol(canvas_http, storage_http, credentials)
    editor = EditorFactory.create(settings, canvas_http, credentials, destination_id)
    return DocumentPusher(
        server=server,
        orchestrator=UploadOrchestrator(server, protocol),
        editor=editor,
        destination_id=destination_id,
    )

import re

import httpx

from canvas_uploader.editor.base import BaseEditor
from canvas_uploader.editor.exceptions import EditorError
from canvas_uploader.logging.logger import Log
from canvas_uploader.upload.credentials import BaseCredentialProvider
from canvas_uploader.upload.protocol import parse_body

PAGE_PATH_RE = re.compile(r"/courses/\d+/pages/([^/?#]+)")


def page_slug_from_url(page_url: str) -> str | None:
    match = PAGE_PATH_RE.search(page_url or "")
    return match.group(1) if match else None


class CanvasPageEditor(BaseEditor):
    """Edits the body of a Canvas wiki page through the Pages API."""

    def __init__(
        self,
        client: httpx.Client,
        credentials: BaseCredentialProvider,
        course_id: str,
        page_slug: str | None,
    ) -> None:
        self._client = client
        self._credentials = credentials
        self._course_id = course_id
        self._page_slug = page_slug
        self._current_body: str | None = None

    @property
    def _page_path(self) -> str:
        return f"/api/v1/courses/{self._course_id}/pages/{self._page_slug}"

    def is_available(self) -> bool:
        if not self._course_id or not self._page_slug:
            return False
        try:
            response = self._get_page()
        except httpx.TransportError as exc:
            Log.warning(f"Canvas page not reachable: {exc}")
            return False
        return response.is_success

    def focus(self) -> None:
        try:
            response = self._get_page()
        except httpx.TransportError as exc:
            raise EditorError(f"Cannot load page {self._page_slug}: {exc}") from exc
        if not response.is_success:
            raise EditorError(f"Cannot load page {self._page_slug}: HTTP {response.status_code}")
        body = parse_body(response).get("body")
        self._current_body = body if isinstance(body, str) else ""

    def set_content(self, html: str) -> None:
        self._put_body(html)

    def insert_content(self, html: str) -> None:
        if self._current_body is None:
            self.focus()
        self._put_body((self._current_body or "") + html)

    def _get_page(self) -> httpx.Response:
        return self._client.get(
            self._page_path,
            headers={"Accept": "application/json", **self._credentials.auth_headers()},
        )

    def _put_body(self, html: str) -> None:
        form = {"wiki_page[body]": html}
        token = self._credentials.csrf_token()
        if token:
            form["authenticity_token"] = token
        try:
            response = self._client.put(
                self._page_path,
                data=form,
                headers={"Accept": "application/json", **self._credentials.auth_headers()},
            )
        except httpx.TransportError as exc:
            raise EditorError(f"Cannot save page {self._page_slug}: {exc}") from exc
        if not response.is_success:
            raise EditorError(f"Cannot save page {self._page_slug}: HTTP {response.status_code}")
        self._current_body = html
        Log.info(f"Saved page {self._page_slug} ({len(html)} chars)")

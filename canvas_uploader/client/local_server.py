import httpx

from canvas_uploader.client.exceptions import LocalServerError
from canvas_uploader.transform.models import TransformedFragment
from canvas_uploader.upload.base import BaseAssetSource
from canvas_uploader.upload.exceptions import AssetFetchError
from canvas_uploader.upload.models import AssetPayload


class LocalServerClient(BaseAssetSource):
    """Talks to the local server that lists, transforms and serves documents.

    ``client`` must have the server's base URL set.
    """

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    def list_files(self) -> list[str]:
        data = self._get_json("/api/files")
        files = data.get("files") or []
        return [str(item) for item in files]

    def fetch_content(self, file: str) -> TransformedFragment:
        data = self._get_json("/api/content", params={"file": file})
        return TransformedFragment(
            file=str(data.get("file") or file),
            body_html=str(data.get("bodyHtml") or ""),
            warnings=[str(w) for w in data.get("warnings") or []],
        )

    def fetch_asset(self, document_path: str, asset_path: str) -> AssetPayload:
        try:
            response = self._client.get(
                "/api/asset",
                params={"html": document_path, "path": asset_path},
            )
        except httpx.TransportError as exc:
            raise AssetFetchError(f"asset fetch failed: {exc}") from exc
        if not response.is_success:
            raise AssetFetchError(f"asset fetch failed {response.status_code}")
        content_type = response.headers.get("Content-Type", "application/octet-stream")
        return AssetPayload(
            content=response.content,
            content_type=content_type.split(";")[0].strip(),
        )

    def _get_json(self, path: str, params: dict[str, str] | None = None) -> dict:
        try:
            response = self._client.get(path, params=params)
        except httpx.TransportError as exc:
            raise LocalServerError(f"Local server not reachable: {exc}") from exc
        try:
            data = response.json()
        except ValueError:
            data = None
        if not response.is_success:
            message = None
            if isinstance(data, dict):
                message = data.get("error") or data.get("message")
            raise LocalServerError(message or f"HTTP {response.status_code}")
        if not isinstance(data, dict):
            raise LocalServerError(f"Unexpected response from {path}")
        return data

import httpx
import pytest

from canvas_uploader.client.exceptions import LocalServerError
from canvas_uploader.client.local_server import LocalServerClient
from canvas_uploader.upload.exceptions import AssetFetchError

SERVER = "http://127.0.0.1:3847"


def _client(handler) -> LocalServerClient:  # type: ignore[no-untyped-def]
    return LocalServerClient(httpx.Client(base_url=SERVER, transport=httpx.MockTransport(handler)))


class TestListFiles:
    def test_returns_files(self) -> None:
        client = _client(lambda r: httpx.Response(200, json={"root": "/x", "files": ["a.html"]}))

        assert client.list_files() == ["a.html"]

    def test_missing_files_key(self) -> None:
        client = _client(lambda r: httpx.Response(200, json={"root": "/x"}))

        assert client.list_files() == []


class TestFetchContent:
    def test_maps_wire_fields(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={"file": "ch 1.html", "bodyHtml": "<p>x</p>", "warnings": ["w"]},
            )

        fragment = _client(handler).fetch_content("ch 1.html")

        assert fragment.file == "ch 1.html"
        assert fragment.body_html == "<p>x</p>"
        assert fragment.warnings == ["w"]
        assert seen[0].url.path == "/api/content"
        assert seen[0].url.params["file"] == "ch 1.html"

    def test_error_message_from_server(self) -> None:
        client = _client(lambda r: httpx.Response(404, json={"error": "Document not found: x"}))

        with pytest.raises(LocalServerError, match="Document not found: x"):
            client.fetch_content("x")

    def test_error_without_json_body(self) -> None:
        client = _client(lambda r: httpx.Response(502, text="bad gateway"))

        with pytest.raises(LocalServerError, match="HTTP 502"):
            client.fetch_content("x")

    def test_unreachable_server(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(LocalServerError, match="not reachable"):
            _client(handler).fetch_content("x")

    def test_non_object_payload(self) -> None:
        client = _client(lambda r: httpx.Response(200, json=["x"]))

        with pytest.raises(LocalServerError, match="Unexpected response"):
            client.fetch_content("x")


class TestFetchAsset:
    def test_returns_bytes_and_media_type(self, png_bytes: bytes) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200, content=png_bytes, headers={"Content-Type": "image/png; charset=binary"}
            )

        payload = _client(handler).fetch_asset("chapters/one.html", "img/fig1.png")

        assert payload.content == png_bytes
        assert payload.content_type == "image/png"
        assert seen[0].url.params["html"] == "chapters/one.html"
        assert seen[0].url.params["path"] == "img/fig1.png"

    def test_missing_asset(self) -> None:
        client = _client(lambda r: httpx.Response(404, text="Asset not found"))

        with pytest.raises(AssetFetchError, match="404"):
            client.fetch_asset("doc.html", "img/x.png")

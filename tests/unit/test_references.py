import pytest

from canvas_uploader.transform.references import (
    ReferenceKind,
    classify_reference,
    is_remote_url,
    local_path,
)


class TestClassifyReference:
    @pytest.mark.parametrize(
        "src",
        ["http://example.com/a.png", "HTTPS://example.com/a.png", "//cdn.example.com/a.png"],
    )
    def test_remote(self, src: str) -> None:
        reference = classify_reference(src)

        assert reference is not None
        assert reference.kind is ReferenceKind.REMOTE
        assert not reference.is_local

    @pytest.mark.parametrize("src", ["data:image/png;base64,AAAA", "blob:https://x/1"])
    def test_embedded(self, src: str) -> None:
        reference = classify_reference(src)

        assert reference is not None
        assert reference.kind is ReferenceKind.EMBEDDED

    @pytest.mark.parametrize("src", ["img/a.png", "../shared/a.png", "a.svg"])
    def test_local(self, src: str) -> None:
        reference = classify_reference(src)

        assert reference is not None
        assert reference.is_local

    @pytest.mark.parametrize("src", [None, "", "   "])
    def test_empty_is_ignored(self, src: str | None) -> None:
        assert classify_reference(src) is None

    def test_strips_surrounding_whitespace(self) -> None:
        reference = classify_reference("  img/a.png ")

        assert reference is not None
        assert reference.src == "img/a.png"


class TestLocalPath:
    def test_drops_query_and_fragment(self) -> None:
        assert local_path("img/a.png?v=2#top") == "img/a.png"

    def test_decodes_percent_escapes(self) -> None:
        assert local_path("img/my%20figure.png") == "img/my figure.png"


class TestIsRemoteUrl:
    def test_relative_path_is_not_remote(self) -> None:
        assert is_remote_url("css/site.css") is False

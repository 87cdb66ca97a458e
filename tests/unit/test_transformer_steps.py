from pathlib import Path

from bs4 import BeautifulSoup

from canvas_uploader.sandbox.path_sandbox import PathSandbox
from canvas_uploader.transform.inliner import BaseCssInliner
from canvas_uploader.transform.pipeline import TransformContext
from canvas_uploader.transform.steps import (
    AuditImagesStep,
    ExtractBodyStep,
    ReparseStep,
    SerializeStep,
)
from canvas_uploader.transform.transformer import build_transformer


class RecordingInliner(BaseCssInliner):
    def __init__(self, output: str | None = None) -> None:
        self.calls: list[tuple[str, str]] = []
        self._output = output

    def inline(self, html: str, css: str) -> str:
        self.calls.append((html, css))
        return html if self._output is None else self._output


class TestInlinerInputs:
    def test_css_blocks_reach_inliner_in_source_order(self, site_root: Path) -> None:
        inliner = RecordingInliner()

        build_transformer(site_root, inliner=inliner).transform("chapter1.html")

        assert len(inliner.calls) == 1
        html, css = inliner.calls[0]
        assert css.index("p.note { color: red; }") < css.index("p.note { color: green; }")
        assert "<style" not in html
        assert 'rel="stylesheet"' not in html

    def test_xml_declaration_is_not_passed_to_inliner(self, site_root: Path) -> None:
        inliner = RecordingInliner()

        build_transformer(site_root, inliner=inliner).transform("chapter1.html")

        html, _ = inliner.calls[0]
        assert "<?xml" not in html

    def test_document_without_body_returns_whole_markup(self, tmp_path: Path) -> None:
        (tmp_path / "bare.html").write_text("<p>Only a paragraph</p>", encoding="utf-8")

        fragment = build_transformer(tmp_path, inliner=RecordingInliner()).transform("bare.html")

        assert fragment.body_html == "<p>Only a paragraph</p>"


class TestSteps:
    def test_reparse_drops_style_left_by_inliner(self) -> None:
        context = TransformContext(relative_path="doc.html")
        context.inlined_html = (
            "<html><head><style>p{}</style>"
            '<link rel="stylesheet" href="x.css"><link rel="icon" href="i.ico">'
            "</head><body><p>x</p></body></html>"
        )

        ReparseStep().run(context)

        tree = context.require_tree()
        assert tree.find("style") is None
        assert [link["rel"] for link in tree.find_all("link")] == [["icon"]]

    def test_serialize_strips_processing_instruction(self) -> None:
        context = TransformContext(relative_path="doc.html")
        context.tree = BeautifulSoup("<?xml version='1.0' ?><p>x</p>", "html.parser")

        SerializeStep().run(context)

        assert context.serialized_html == "<p>x</p>"

    def test_extract_body_returns_inner_markup(self) -> None:
        context = TransformContext(relative_path="doc.html")
        context.tree = BeautifulSoup(
            "<html><body><h1>T</h1><p>x</p></body></html>", "html.parser"
        )

        ExtractBodyStep().run(context)

        assert context.body_html == "<h1>T</h1><p>x</p>"

    def test_audit_reports_image_outside_root(self, tmp_path: Path) -> None:
        root = tmp_path / "root"
        root.mkdir()
        (tmp_path / "secret.png").write_bytes(b"x")
        context = TransformContext(relative_path="doc.html", source_path=root / "doc.html")
        context.tree = BeautifulSoup('<img src="../secret.png"><img src="">', "html.parser")

        AuditImagesStep(PathSandbox(root)).run(context)

        assert context.warnings == ["Image outside root: ../secret.png"]

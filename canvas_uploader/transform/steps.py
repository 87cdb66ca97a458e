from bs4 import BeautifulSoup, ProcessingInstruction

from canvas_uploader.logging.logger import Log
from canvas_uploader.sandbox.exceptions import PathEscapeError
from canvas_uploader.sandbox.path_sandbox import PathSandbox
from canvas_uploader.transform.cleanup import remove_trailing_empty_paragraphs
from canvas_uploader.transform.css_collector import StylesheetCollector, is_stylesheet_link
from canvas_uploader.transform.exceptions import DocumentNotFoundError, DocumentParseError
from canvas_uploader.transform.inliner import BaseCssInliner
from canvas_uploader.transform.pipeline import TransformContext, TransformStep
from canvas_uploader.transform.references import ReferenceKind, classify_reference

PARSER = "html.parser"


class ReadSourceStep(TransformStep):
    def __init__(self, sandbox: PathSandbox) -> None:
        self._sandbox = sandbox

    def run(self, context: TransformContext) -> TransformContext:
        try:
            path = self._sandbox.resolve(context.relative_path)
        except PathEscapeError as exc:
            raise DocumentNotFoundError(f"Invalid path: {context.relative_path}") from exc
        if not path.is_file():
            raise DocumentNotFoundError(f"Document not found: {context.relative_path}")
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise DocumentParseError(
                f"Document is not valid UTF-8: {context.relative_path}"
            ) from exc
        if not text.strip():
            raise DocumentParseError(f"Document is empty: {context.relative_path}")
        context.source_path = path
        context.source_text = text
        Log.info(f"Read {len(text)} chars from {context.relative_path}")
        return context


class ParseMarkupStep(TransformStep):
    def run(self, context: TransformContext) -> TransformContext:
        tree = BeautifulSoup(context.source_text, PARSER)
        if tree.find(True) is None:
            raise DocumentParseError(f"Document has no elements: {context.relative_path}")
        context.tree = tree
        return context


class CollectStylesheetsStep(TransformStep):
    def __init__(self, collector: StylesheetCollector) -> None:
        self._collector = collector

    def run(self, context: TransformContext) -> TransformContext:
        context.stylesheet = self._collector.collect(
            context.require_tree(), context.document_dir
        )
        context.warnings.extend(context.stylesheet.warnings)
        return context


class AuditImagesStep(TransformStep):
    """Reports unusable image references; ``src`` values are never rewritten here."""

    def __init__(self, sandbox: PathSandbox) -> None:
        self._sandbox = sandbox

    def run(self, context: TransformContext) -> TransformContext:
        for img in context.require_tree().find_all("img"):
            reference = classify_reference(img.get("src"))
            if reference is None or reference.kind is ReferenceKind.EMBEDDED:
                continue
            if reference.kind is ReferenceKind.REMOTE:
                context.warnings.append(f"Remote image left unchanged: {reference.src}")
                continue
            try:
                image_path = self._sandbox.resolve_from(context.document_dir, reference.path)
            except PathEscapeError:
                context.warnings.append(f"Image outside root: {reference.src}")
                continue
            if not image_path.is_file():
                context.warnings.append(f"Image not found: {reference.src}")
        return context


class SerializeStep(TransformStep):
    def run(self, context: TransformContext) -> TransformContext:
        tree = context.require_tree()
        # lxml refuses str input that carries an XML encoding declaration.
        for node in tree.find_all(string=lambda s: isinstance(s, ProcessingInstruction)):
            node.extract()
        context.serialized_html = str(tree)
        return context


class InlineCssStep(TransformStep):
    def __init__(self, inliner: BaseCssInliner) -> None:
        self._inliner = inliner

    def run(self, context: TransformContext) -> TransformContext:
        context.inlined_html = self._inliner.inline(
            context.serialized_html, context.stylesheet.css
        )
        Log.info(
            f"Inlined {len(context.stylesheet.blocks)} stylesheet blocks "
            f"into {context.relative_path}"
        )
        return context


class ReparseStep(TransformStep):
    def run(self, context: TransformContext) -> TransformContext:
        tree = BeautifulSoup(context.inlined_html, PARSER)
        for node in tree.find_all(["style", "link"]):
            if node.name == "style" or is_stylesheet_link(node):
                node.decompose()
        context.tree = tree
        return context


class CleanupStep(TransformStep):
    def run(self, context: TransformContext) -> TransformContext:
        removed = remove_trailing_empty_paragraphs(context.require_tree())
        if removed:
            Log.debug(f"Removed {removed} trailing empty card paragraphs")
        return context


class ExtractBodyStep(TransformStep):
    def run(self, context: TransformContext) -> TransformContext:
        tree = context.require_tree()
        body = tree.body
        context.body_html = body.decode_contents() if body is not None else str(tree)
        return context

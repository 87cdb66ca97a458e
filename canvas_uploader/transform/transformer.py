from pathlib import Path

from canvas_uploader.logging.logger import Log
from canvas_uploader.sandbox.path_sandbox import PathSandbox
from canvas_uploader.transform.css_collector import StylesheetCollector
from canvas_uploader.transform.exceptions import TransformError
from canvas_uploader.transform.inliner import BaseCssInliner, PremailerInliner
from canvas_uploader.transform.models import TransformedFragment
from canvas_uploader.transform.pipeline import TransformContext, TransformStep
from canvas_uploader.transform.steps import (
    AuditImagesStep,
    CleanupStep,
    CollectStylesheetsStep,
    ExtractBodyStep,
    InlineCssStep,
    ParseMarkupStep,
    ReadSourceStep,
    ReparseStep,
    SerializeStep,
)


class DocumentTransformer:
    """Turns a document under the root into a self-contained body fragment.

    Pipeline: read -> parse -> collect CSS -> audit images -> serialize ->
    inline -> re-parse -> cleanup -> extract body.
    """

    def __init__(self, steps: list[TransformStep]) -> None:
        self._steps = steps

    def transform(self, relative_path: str) -> TransformedFragment:
        Log.info(f"Transforming {relative_path}")
        context = TransformContext(relative_path=relative_path)
        try:
            for step in self._steps:
                context = step.run(context)
        except TransformError as exc:
            Log.error(f"Transform of {relative_path} failed: {exc}")
            raise
        for warning in context.warnings:
            Log.warning(f"{relative_path}: {warning}")
        return TransformedFragment(
            file=relative_path,
            body_html=context.body_html,
            warnings=context.warnings,
        )


def default_steps(sandbox: PathSandbox, inliner: BaseCssInliner) -> list[TransformStep]:
    return [
        ReadSourceStep(sandbox),
        ParseMarkupStep(),
        CollectStylesheetsStep(StylesheetCollector(sandbox)),
        AuditImagesStep(sandbox),
        SerializeStep(),
        InlineCssStep(inliner),
        ReparseStep(),
        CleanupStep(),
        ExtractBodyStep(),
    ]


def build_transformer(
    root: Path,
    inliner: BaseCssInliner | None = None,
) -> DocumentTransformer:
    """Build a DocumentTransformer sandboxed to ``root``."""
    sandbox = PathSandbox(root)
    return DocumentTransformer(default_steps(sandbox, inliner or PremailerInliner()))

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from bs4 import BeautifulSoup

from canvas_uploader.transform.models import StylesheetFragment


@dataclass(slots=True)
class TransformContext:
    relative_path: str
    source_path: Path | None = None
    source_text: str = ""
    tree: BeautifulSoup | None = None
    stylesheet: StylesheetFragment = field(default_factory=StylesheetFragment)
    serialized_html: str = ""
    inlined_html: str = ""
    body_html: str = ""
    warnings: list[str] = field(default_factory=list)

    @property
    def document_dir(self) -> Path:
        if self.source_path is None:
            raise ValueError("TransformContext.source_path must be set first")
        return self.source_path.parent

    def require_tree(self) -> BeautifulSoup:
        if self.tree is None:
            raise ValueError("TransformContext.tree must be set first")
        return self.tree


class TransformStep(ABC):
    @abstractmethod
    def run(self, context: TransformContext) -> TransformContext:
        raise NotImplementedError

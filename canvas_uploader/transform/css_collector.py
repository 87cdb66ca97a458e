from pathlib import Path

from bs4 import BeautifulSoup, Tag

from canvas_uploader.logging.logger import Log
from canvas_uploader.sandbox.exceptions import PathEscapeError
from canvas_uploader.sandbox.path_sandbox import PathSandbox
from canvas_uploader.transform.models import StylesheetFragment
from canvas_uploader.transform.references import is_remote_url, local_path


def is_stylesheet_link(node: Tag) -> bool:
    rel = node.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return any(value.lower() == "stylesheet" for value in rel)


class StylesheetCollector:
    """Pulls CSS out of ``<style>`` and local ``<link rel=stylesheet>`` nodes.

    Nodes are visited in document order regardless of tag name, so the
    combined CSS cascades exactly like the browser would have applied it.
    Every visited node is removed from the tree.
    """

    def __init__(self, sandbox: PathSandbox) -> None:
        self._sandbox = sandbox

    def collect(self, tree: BeautifulSoup, document_dir: Path) -> StylesheetFragment:
        fragment = StylesheetFragment()
        for node in tree.find_all(["style", "link"]):
            if node.name == "style":
                fragment.append(node.get_text())
                node.decompose()
                continue
            if not is_stylesheet_link(node):
                continue
            self._collect_link(node, document_dir, fragment)
            node.decompose()
        Log.debug(f"Collected {len(fragment.blocks)} stylesheet blocks")
        return fragment

    def _collect_link(
        self,
        node: Tag,
        document_dir: Path,
        fragment: StylesheetFragment,
    ) -> None:
        href = (node.get("href") or "").strip()
        if not href or is_remote_url(href):
            return
        try:
            css_path = self._sandbox.resolve_from(document_dir, local_path(href))
        except PathEscapeError:
            fragment.warnings.append(f"Stylesheet outside root skipped: {href}")
            return
        if not css_path.is_file():
            fragment.warnings.append(f"Stylesheet not found: {href}")
            return
        fragment.append(css_path.read_text(encoding="utf-8", errors="replace"))

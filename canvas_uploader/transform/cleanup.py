from bs4 import BeautifulSoup, Tag

CARD_SELECTOR = ".card"

_BLANK_MARKERS = ("&nbsp;", "\u00a0")


def _child_elements(container: Tag) -> list[Tag]:
    return [child for child in container.contents if isinstance(child, Tag)]


def _is_blank_paragraph(node: Tag) -> bool:
    if node.name != "p":
        return False
    text = node.get_text()
    for marker in _BLANK_MARKERS:
        text = text.replace(marker, "")
    return not text.strip() and node.find(True) is None


def remove_trailing_empty_paragraphs(tree: BeautifulSoup) -> int:
    """Drop the blank trailing ``<p>`` that make4ht leaves inside theorem cards.

    Only the last child element of each card is inspected, and it is kept
    when the element before it is blank too, so a second run removes
    nothing. Returns the number of paragraphs removed.
    """
    removed = 0
    for card in tree.select(CARD_SELECTOR):
        children = _child_elements(card)
        if not children or not _is_blank_paragraph(children[-1]):
            continue
        if len(children) > 1 and _is_blank_paragraph(children[-2]):
            continue
        children[-1].decompose()
        removed += 1
    return removed

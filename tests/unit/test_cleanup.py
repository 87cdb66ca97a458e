from bs4 import BeautifulSoup

from canvas_uploader.transform.cleanup import remove_trailing_empty_paragraphs


def _tree(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class TestRemovesTrailingBlankParagraph:
    def test_nbsp_paragraph_removed(self) -> None:
        tree = _tree('<div class="card"><p>Theorem</p><p>&nbsp;</p></div>')

        removed = remove_trailing_empty_paragraphs(tree)

        assert removed == 1
        assert str(tree) == '<div class="card"><p>Theorem</p></div>'

    def test_whitespace_and_nbsp_mix_removed(self) -> None:
        tree = _tree('<div class="card"><p>a</p><p>   \n</p>\n</div>')

        remove_trailing_empty_paragraphs(tree)

        assert [p.get_text() for p in tree.find_all("p")] == ["a"]

    def test_inline_style_does_not_block_removal(self) -> None:
        tree = _tree('<div class="card theorem"><p>a</p><p style="margin:0">&nbsp;</p></div>')

        assert remove_trailing_empty_paragraphs(tree) == 1


class TestLeavesOtherContentAlone:
    def test_text_paragraph_kept(self) -> None:
        html = '<div class="card"><p>a</p><p>text</p></div>'
        tree = _tree(html)

        assert remove_trailing_empty_paragraphs(tree) == 0
        assert str(tree) == html

    def test_paragraph_with_image_kept(self) -> None:
        html = '<div class="card"><p>a</p><p><img src="x.png"/></p></div>'
        tree = _tree(html)

        assert remove_trailing_empty_paragraphs(tree) == 0
        assert tree.find("img") is not None

    def test_non_paragraph_last_child_kept(self) -> None:
        html = '<div class="card"><p>&nbsp;</p><div></div></div>'
        tree = _tree(html)

        assert remove_trailing_empty_paragraphs(tree) == 0

    def test_blank_paragraph_outside_card_kept(self) -> None:
        html = '<div class="other"><p>&nbsp;</p></div>'
        tree = _tree(html)

        assert remove_trailing_empty_paragraphs(tree) == 0

    def test_stacked_blank_paragraphs_kept(self) -> None:
        html = '<div class="card"><p>a</p><p>&nbsp;</p><p>&nbsp;</p></div>'
        tree = _tree(html)

        assert remove_trailing_empty_paragraphs(tree) == 0
        assert len(tree.find_all("p")) == 3


class TestIdempotence:
    def test_second_run_changes_nothing(self) -> None:
        tree = _tree(
            '<div class="card"><p>one</p><p>&nbsp;</p></div>'
            '<div class="card"><p>two</p><p><img src="a.png"/></p></div>'
        )

        remove_trailing_empty_paragraphs(tree)
        once = str(tree)
        remove_trailing_empty_paragraphs(tree)

        assert str(tree) == once

    def test_stacked_blank_paragraphs_stable_across_runs(self) -> None:
        tree = _tree('<div class="card"><p>a</p><p>&nbsp;</p><p>&nbsp;</p></div>')

        remove_trailing_empty_paragraphs(tree)
        once = str(tree)
        remove_trailing_empty_paragraphs(tree)

        assert str(tree) == once

    def test_lone_blank_paragraph_removed_once(self) -> None:
        tree = _tree('<div class="card"><p>&nbsp;</p></div>')

        assert remove_trailing_empty_paragraphs(tree) == 1
        assert remove_trailing_empty_paragraphs(tree) == 0
        assert str(tree) == '<div class="card"></div>'

import logging
from abc import ABC, abstractmethod

from lxml import etree
from premailer import Premailer

from canvas_uploader.transform.exceptions import DocumentParseError


class BaseCssInliner(ABC):
    """Contract for CSS-to-``style``-attribute inlining engines."""

    @abstractmethod
    def inline(self, html: str, css: str) -> str:
        """Merge ``css`` into the ``style`` attribute of every matching element.

        Specificity and source order decide which declaration wins. Media
        queries are dropped and no ``<style>`` element is left behind.

        Raises:
            DocumentParseError: if the markup or stylesheet cannot be processed.
        """


class PremailerInliner(BaseCssInliner):
    """Inlines CSS using premailer with network access switched off."""

    def inline(self, html: str, css: str) -> str:
        premailer = Premailer(
            html,
            css_text=[css] if css.strip() else None,
            keep_style_tags=False,
            disable_leftover_css=True,
            remove_classes=False,
            allow_network=False,
            allow_loading_external_files=False,
            disable_validation=True,
            include_star_selectors=True,
            cssutils_logging_level=logging.CRITICAL,
        )
        try:
            return premailer.transform(pretty_print=False)
        except (etree.LxmlError, ValueError) as exc:
            raise DocumentParseError(f"CSS inlining failed: {exc}") from exc

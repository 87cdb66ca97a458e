from abc import ABC, abstractmethod


class BaseEditor(ABC):
    """Contract for the rich-text editor that finally receives the fragment."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return True when the editor can accept content right now."""

    @abstractmethod
    def focus(self) -> None:
        """Prepare the editor for an edit (load the current content)."""

    @abstractmethod
    def set_content(self, html: str) -> None:
        """Replace the whole content and mark it changed.

        Raises:
            EditorError: if the editor rejects the content.
        """

    @abstractmethod
    def insert_content(self, html: str) -> None:
        """Insert ``html`` at the editor's insertion point and mark it changed.

        Raises:
            EditorError: if the editor rejects the content.
        """

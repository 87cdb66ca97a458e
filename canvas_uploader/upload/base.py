from abc import ABC, abstractmethod

from canvas_uploader.upload.models import AssetPayload


class BaseAssetSource(ABC):
    """Contract for reading a document's local asset bytes."""

    @abstractmethod
    def fetch_asset(self, document_path: str, asset_path: str) -> AssetPayload:
        """Return the bytes of ``asset_path`` relative to the document's directory.

        Raises:
            AssetFetchError: if the asset cannot be delivered.
        """

from bs4 import BeautifulSoup, Tag

from canvas_uploader.logging.logger import Log
from canvas_uploader.transform.references import ImageReference, classify_reference
from canvas_uploader.upload.base import BaseAssetSource
from canvas_uploader.upload.exceptions import UploadError
from canvas_uploader.upload.filenames import UploadFilenameFactory
from canvas_uploader.upload.models import UploadAsset, UploadBatchResult, UploadTarget
from canvas_uploader.upload.protocol import AssetUploadProtocol


def find_local_images(tree: BeautifulSoup) -> list[tuple[Tag, ImageReference]]:
    """Return ``<img>`` elements with a local ``src``, in document order."""
    candidates: list[tuple[Tag, ImageReference]] = []
    for img in tree.find_all("img"):
        reference = classify_reference(img.get("src"))
        if reference is not None and reference.is_local:
            candidates.append((img, reference))
    return candidates


class UploadOrchestrator:
    """Uploads every local image of a fragment and points ``src`` at the hosted copy.

    Images are handled one at a time in document order. A failed image keeps
    its original ``src`` and never stops the batch.
    """

    def __init__(
        self,
        asset_source: BaseAssetSource,
        protocol: AssetUploadProtocol,
        filenames: UploadFilenameFactory | None = None,
    ) -> None:
        self._asset_source = asset_source
        self._protocol = protocol
        self._filenames = filenames or UploadFilenameFactory()

    def upload_images(
        self,
        fragment: str,
        source_document_path: str,
        destination_id: str,
        folder: str,
    ) -> UploadBatchResult:
        tree = BeautifulSoup(fragment, "html.parser")
        candidates = find_local_images(tree)
        if not candidates:
            return UploadBatchResult(updated_fragment=fragment)

        target = UploadTarget(destination_id=destination_id, folder=folder)
        converted = 0
        for img, reference in candidates:
            url = self._upload_one(reference, source_document_path, target)
            if url is None:
                continue
            img["src"] = url
            converted += 1

        Log.info(f"Images uploaded: {converted}/{len(candidates)}")
        return UploadBatchResult(
            updated_fragment=str(tree),
            converted=converted,
            total=len(candidates),
        )

    def _upload_one(
        self,
        reference: ImageReference,
        source_document_path: str,
        target: UploadTarget,
    ) -> str | None:
        filename = self._filenames.build(reference.src)
        try:
            payload = self._asset_source.fetch_asset(source_document_path, reference.path)
        except UploadError as exc:
            Log.warning(f"Could not upload image {reference.src}: {exc}")
            return None

        Log.info(f"Uploading image {filename}")
        asset = UploadAsset(
            filename=filename,
            content=payload.content,
            content_type=payload.content_type,
        )
        result = self._protocol.upload(asset, target)
        if not result.ok:
            failure = result.failure
            Log.warning(
                f"Could not upload image {reference.src}: {failure.message} "
                f"(phase={failure.phase.value}, status={failure.status_code}, "
                f"body={failure.body!r})"
            )
            return None
        Log.info(f"Image uploaded: {result.url}")
        return result.url

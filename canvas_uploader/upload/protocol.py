"""Three-phase file upload handshake against the Canvas files API.

preflight -> binary upload -> finalize (only when the storage answers with
a ``Location`` header) -> done. Any phase can end in ``failed``; the
failure never escapes as an exception, it is returned as an UploadResult.
"""

import json
from collections.abc import Callable
from dataclasses import dataclass
from urllib.parse import urlsplit

import httpx

from canvas_uploader.logging.logger import Log
from canvas_uploader.upload.credentials import BaseCredentialProvider
from canvas_uploader.upload.exceptions import NoUsableUrlError, UploadError, UploadPhaseFailure
from canvas_uploader.upload.models import (
    PreflightGrant,
    UploadAsset,
    UploadFailure,
    UploadResult,
    UploadState,
    UploadTarget,
)

CANDIDATE_URL_FIELDS = ("url", "download_url", "preview_url")
DUPLICATE_POLICY = "rename"


@dataclass(slots=True)
class UploadContext:
    asset: UploadAsset
    target: UploadTarget
    state: UploadState = UploadState.PREFLIGHT
    grant: PreflightGrant | None = None
    finalize_url: str | None = None
    last_status: int | None = None
    url: str | None = None
    failure: UploadFailure | None = None


def parse_body(response: httpx.Response) -> dict[str, object]:
    """Decode a JSON object body, wrapping anything else as ``{"raw": text}``."""
    text = response.text
    try:
        data = json.loads(text)
    except ValueError:
        return {"raw": text}
    if isinstance(data, dict):
        return data
    return {"raw": text, "data": data}


def pick_url(record: dict[str, object]) -> str | None:
    for name in CANDIDATE_URL_FIELDS:
        value = record.get(name)
        if isinstance(value, str) and value:
            return value
    return None


class AssetUploadProtocol:
    """Registers one asset with the remote file store and returns its hosted URL.

    ``api_client`` talks to the Canvas instance (its base URL is the
    Canvas origin) and carries the session credentials; ``storage_client``
    posts the bytes to the storage URL handed out by the preflight and never
    sends credentials or follows redirects.
    """

    def __init__(
        self,
        api_client: httpx.Client,
        storage_client: httpx.Client,
        credentials: BaseCredentialProvider,
    ) -> None:
        self._api = api_client
        self._storage = storage_client
        self._credentials = credentials
        self._handlers: dict[UploadState, Callable[[UploadContext], UploadContext]] = {
            UploadState.PREFLIGHT: self._preflight,
            UploadState.BINARY_UPLOAD: self._binary_upload,
            UploadState.FINALIZE: self._finalize,
        }

    def upload(self, asset: UploadAsset, target: UploadTarget) -> UploadResult:
        context = UploadContext(asset=asset, target=target)
        while not context.state.is_terminal:
            context = self.transition(context)
        if context.state is UploadState.DONE and context.url:
            return UploadResult.success(context.url)
        if context.failure is None:
            raise ValueError(f"Upload ended in {context.state.value} without a result")
        return UploadResult.failed(context.failure)

    def transition(self, context: UploadContext) -> UploadContext:
        """Run the handler of the current state and move to the next one."""
        phase = context.state
        handler = self._handlers[phase]
        try:
            return handler(context)
        except UploadPhaseFailure as exc:
            context.failure = UploadFailure(
                phase=phase,
                message=str(exc),
                status_code=exc.status_code,
                body=exc.body,
            )
        except UploadError as exc:
            context.failure = UploadFailure(
                phase=phase,
                message=str(exc),
                status_code=context.last_status,
            )
        except httpx.TransportError as exc:
            context.failure = UploadFailure(phase=phase, message=f"Network error: {exc}")
        Log.debug(f"{context.asset.filename}: {phase.value} failed: {context.failure.message}")
        context.state = UploadState.FAILED
        return context

    def _preflight(self, context: UploadContext) -> UploadContext:
        asset, target = context.asset, context.target
        token = self._credentials.csrf_token()
        form = {
            "name": asset.filename,
            "size": str(asset.size),
            "content_type": asset.content_type or "application/octet-stream",
            "on_duplicate": DUPLICATE_POLICY,
        }
        if target.folder:
            form["parent_folder_path"] = target.folder
        if token:
            form["authenticity_token"] = token
        headers = {
            "Accept": "application/json",
            "X-Requested-With": "XMLHttpRequest",
            **self._credentials.auth_headers(),
        }
        response = self._api.post(
            f"/api/v1/courses/{target.destination_id}/files",
            data=form,
            headers=headers,
        )
        context.last_status = response.status_code
        body = parse_body(response)
        if not response.is_success:
            raise UploadPhaseFailure(
                f"Preflight rejected with HTTP {response.status_code}",
                status_code=response.status_code,
                body=body,
            )
        upload_url = body.get("upload_url")
        if not isinstance(upload_url, str) or not upload_url:
            raise UploadPhaseFailure(
                "Preflight response has no upload_url",
                status_code=response.status_code,
                body=body,
            )
        params = body.get("upload_params") or {}
        if not isinstance(params, dict):
            params = {}
        context.grant = PreflightGrant(
            upload_url=upload_url,
            upload_params={str(k): str(v) for k, v in params.items()},
        )
        context.state = UploadState.BINARY_UPLOAD
        return context

    def _binary_upload(self, context: UploadContext) -> UploadContext:
        grant, asset = context.grant, context.asset
        if grant is None:
            raise ValueError("UploadContext.grant must be set before the binary upload")
        response = self._storage.post(
            grant.upload_url,
            data=grant.upload_params,
            files={"file": (asset.filename, asset.content, asset.content_type)},
            follow_redirects=False,
        )
        context.last_status = response.status_code
        location = response.headers.get("Location")
        if location:
            context.finalize_url = str(response.url.join(location))
            context.state = UploadState.FINALIZE
            return context
        body = parse_body(response)
        if not response.is_success:
            raise UploadPhaseFailure(
                f"Binary upload rejected with HTTP {response.status_code}",
                status_code=response.status_code,
                body=body,
            )
        return self._complete(context, body)

    def _finalize(self, context: UploadContext) -> UploadContext:
        if context.finalize_url is None:
            raise ValueError("UploadContext.finalize_url must be set before finalize")
        headers = {"Accept": "application/json"}
        if self._is_same_origin(context.finalize_url):
            headers.update(self._credentials.auth_headers())
        response = self._api.get(context.finalize_url, headers=headers)
        context.last_status = response.status_code
        body = parse_body(response)
        if not response.is_success:
            raise UploadPhaseFailure(
                f"Finalize rejected with HTTP {response.status_code}",
                status_code=response.status_code,
                body=body,
            )
        return self._complete(context, body)

    def _complete(self, context: UploadContext, record: dict[str, object]) -> UploadContext:
        url = pick_url(record)
        if url is None:
            raise NoUsableUrlError("Upload succeeded but no usable url found")
        context.url = url
        context.state = UploadState.DONE
        return context

    def _is_same_origin(self, url: str) -> bool:
        # Session cookies only travel back to the Canvas origin.
        base = urlsplit(str(self._api.base_url))
        other = urlsplit(url)
        return (base.scheme, base.netloc) == (other.scheme, other.netloc)

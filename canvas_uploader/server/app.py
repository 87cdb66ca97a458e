import mimetypes
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel, ConfigDict, Field

from canvas_uploader.logging.logger import Log
from canvas_uploader.sandbox.exceptions import PathEscapeError
from canvas_uploader.sandbox.path_sandbox import PathSandbox
from canvas_uploader.server.pages import render_home
from canvas_uploader.transform.exceptions import DocumentNotFoundError, TransformError
from canvas_uploader.transform.listing import list_documents
from canvas_uploader.transform.transformer import DocumentTransformer, build_transformer

PUSH_COMMAND = "canvas-uploader push <file> --page-url https://canvas.example.edu/courses/<id>/pages/<page>"


class FileListResponse(BaseModel):
    root: str
    files: list[str]


class ContentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file: str
    body_html: str = Field(alias="bodyHtml")
    warnings: list[str]


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def guess_content_type(path: Path) -> str:
    content_type, _ = mimetypes.guess_type(path.name)
    return content_type or "application/octet-stream"


def create_app(root: Path, transformer: DocumentTransformer | None = None) -> FastAPI:
    """Build the local API serving documents under ``root``."""
    sandbox = PathSandbox(root)
    transformer = transformer or build_transformer(sandbox.root)

    app = FastAPI(title="Canvas HTML Uploader")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
    )

    @app.get("/", response_class=HTMLResponse)
    def home() -> str:
        return render_home(sandbox.root, list_documents(sandbox.root), PUSH_COMMAND)

    @app.get("/api/files", response_model=FileListResponse)
    def files() -> FileListResponse:
        return FileListResponse(root=str(sandbox.root), files=list_documents(sandbox.root))

    @app.get("/api/content", response_model=ContentResponse)
    def content(file: str = "") -> ContentResponse | JSONResponse:
        if not file:
            return _error(400, "Missing ?file=")
        try:
            fragment = transformer.transform(file)
        except DocumentNotFoundError as exc:
            return _error(404, str(exc))
        except TransformError as exc:
            return _error(400, str(exc))
        return ContentResponse(
            file=fragment.file,
            body_html=fragment.body_html,
            warnings=fragment.warnings,
        )

    @app.get("/api/asset")
    def asset(html: str = "", path: str = "") -> Response:
        if not html or not path:
            return PlainTextResponse("Missing html/path", status_code=400)
        try:
            document = sandbox.resolve(html)
            asset_path = sandbox.resolve_from(document.parent, path)
        except PathEscapeError as exc:
            Log.warning(f"Rejected asset request html={html!r} path={path!r}: {exc}")
            return PlainTextResponse("Invalid asset path", status_code=400)
        if not asset_path.is_file():
            return PlainTextResponse("Asset not found", status_code=404)
        return Response(
            content=asset_path.read_bytes(),
            media_type=guess_content_type(asset_path),
        )

    return app

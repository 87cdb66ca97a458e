import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

import httpx
import uvicorn

from canvas_uploader.client.exceptions import LocalServerError
from canvas_uploader.client.local_server import LocalServerClient
from canvas_uploader.client.runner import InsertMode, build_pusher, resolve_canvas_base_url
from canvas_uploader.config.settings import Settings
from canvas_uploader.editor.exceptions import EditorError
from canvas_uploader.logging.logger import Log
from canvas_uploader.server.app import create_app
from canvas_uploader.upload.exceptions import DestinationNotFoundError


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="canvas-uploader",
        description="Inline CSS of local HTML documents and push them, images included, into Canvas.",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Serve documents under a root directory")
    serve.add_argument("root", nargs="?", type=Path, default=None, help="Document root")
    serve.add_argument("--host", default=None, help="Bind address")
    serve.add_argument("--port", type=int, default=None, help="Bind port")

    subparsers.add_parser("files", help="List documents known to the local server")

    push = subparsers.add_parser("push", help="Upload a document's images and insert it")
    push.add_argument("file", help="Document path relative to the server root")
    push.add_argument(
        "--mode",
        default="replace",
        help="replace (replace entire page) or insert (append at the end)",
    )
    push.add_argument("--folder", default=None, help="Canvas folder for uploaded images")
    push.add_argument("--page-url", default=None, help="Canvas page URL being edited")
    push.add_argument("--course-id", default=None, help="Fallback course id")
    push.add_argument("--editor", default=None, choices=["canvas_page", "file"])
    push.add_argument("--output", type=Path, default=None, help="Output path for --editor file")

    return parser.parse_args(list(sys.argv[1:] if argv is None else argv))


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides = {
        "log_level": args.log_level,
        "root_dir": getattr(args, "root", None),
        "server_host": getattr(args, "host", None),
        "server_port": getattr(args, "port", None),
        "upload_folder": getattr(args, "folder", None),
        "canvas_page_url": getattr(args, "page_url", None),
        "canvas_course_id": getattr(args, "course_id", None),
        "editor": getattr(args, "editor", None),
        "editor_output_path": getattr(args, "output", None),
    }
    return settings.model_copy(update={k: v for k, v in overrides.items() if v is not None})


def _serve(settings: Settings) -> int:
    root = settings.root_dir.resolve()
    Log.info(f"Canvas HTML Uploader running: http://{settings.server_host}:{settings.server_port}")
    Log.info(f"Root directory: {root}")
    uvicorn.run(
        create_app(root),
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )
    return 0


def _files(settings: Settings) -> int:
    with httpx.Client(
        base_url=settings.server_base_url, timeout=settings.http_timeout_seconds
    ) as server_http:
        files = LocalServerClient(server_http).list_files()
    if not files:
        print("No HTML files found on local server.")
        return 1
    for file in files:
        print(file)
    return 0


def _push(settings: Settings, file: str, mode: InsertMode) -> int:
    timeout = settings.http_timeout_seconds
    folder = settings.upload_folder.strip() or "latex_images"
    with (
        httpx.Client(base_url=settings.server_base_url, timeout=timeout) as server_http,
        httpx.Client(base_url=resolve_canvas_base_url(settings), timeout=timeout) as canvas_http,
        httpx.Client(timeout=timeout, follow_redirects=False) as storage_http,
    ):
        pusher = build_pusher(settings, server_http, canvas_http, storage_http)
        report = pusher.push(file, mode, folder)
    print(report.message)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point: settings -> logging -> dispatch subcommand."""
    args = parse_args(argv)
    settings = _apply_overrides(Settings(), args)
    Log.configure(settings.log_level)

    try:
        if args.command == "serve":
            return _serve(settings)
        if args.command == "files":
            return _files(settings)
        return _push(settings, args.file, InsertMode.parse(args.mode))
    except (
        LocalServerError,
        DestinationNotFoundError,
        EditorError,
        ValueError,
    ) as exc:
        Log.error(f"{args.command} failed: {exc}")
        print(f"Canvas upload failed: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

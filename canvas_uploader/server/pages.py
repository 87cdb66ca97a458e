from html import escape
from pathlib import Path


def render_home(root: Path, files: list[str], push_command: str) -> str:
    items = "".join(f"<li><code>{escape(f)}</code></li>" for f in files)
    return f"""<!doctype html>
<html>
<head><meta charset="utf-8"><title>Canvas HTML Uploader</title></head>
<body style="font-family: system-ui, -apple-system, Segoe UI, Roboto, Arial, sans-serif; margin: 24px;">
  <h1>Canvas HTML Uploader</h1>
  <p>Root: <code>{escape(str(root))}</code></p>

  <h2>Push a document</h2>
  <p>With this server running, push a document into a Canvas page:</p>
  <pre>{escape(push_command)}</pre>

  <h2>Available HTML files</h2>
  <ul>
    {items}
  </ul>
</body>
</html>"""

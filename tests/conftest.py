from pathlib import Path

import pytest

PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f"
    b"\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)

SAMPLE_DOCUMENT = """<?xml version='1.0' encoding='utf-8' ?>
<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8" />
<title>Chapter 1</title>
<link rel="stylesheet" type="text/css" href="css/base.css" />
<style>p.note { color: green; }</style>
<link rel="stylesheet" href="https://cdn.example.com/remote.css" />
<link rel="stylesheet" href="css/missing.css" />
</head>
<body>
<h1 class="title">Chapter 1</h1>
<div class="card"><p class="note">Theorem 1.</p><p>&nbsp;</p></div>
<p><img src="img/fig1.png" alt="Figure 1" /></p>
<p><img src="img/missing.png" alt="Missing" /></p>
<p><img src="https://example.com/remote.png" alt="Remote" /></p>
<p><img src="data:image/png;base64,AAAA" alt="Embedded" /></p>
</body>
</html>
"""

BASE_CSS = "h1.title { font-weight: bold; }\np.note { color: red; }\n"


@pytest.fixture()
def png_bytes() -> bytes:
    """A valid 1x1 transparent PNG."""
    return PNG_BYTES


@pytest.fixture()
def site_root(tmp_path: Path) -> Path:
    """A document root laid out like make4ht output."""
    root = tmp_path / "site"
    (root / "css").mkdir(parents=True)
    (root / "img").mkdir()
    (root / "chapter1.html").write_text(SAMPLE_DOCUMENT, encoding="utf-8")
    (root / "css" / "base.css").write_text(BASE_CSS, encoding="utf-8")
    (root / "img" / "fig1.png").write_bytes(PNG_BYTES)
    return root

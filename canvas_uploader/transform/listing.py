from pathlib import Path

DOCUMENT_SUFFIXES = {".html", ".htm"}


def list_documents(root: Path) -> list[str]:
    """Return root-relative POSIX paths of every HTML document, sorted.

    Files and directories whose name starts with a dot are skipped.
    """
    root = root.resolve()
    found: list[str] = []
    for path in root.rglob("*"):
        relative = path.relative_to(root)
        if any(part.startswith(".") for part in relative.parts):
            continue
        if path.is_file() and path.suffix.lower() in DOCUMENT_SUFFIXES:
            found.append(relative.as_posix())
    return sorted(found)

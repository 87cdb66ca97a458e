import re

from canvas_uploader.upload.exceptions import DestinationNotFoundError

COURSE_PATH_RE = re.compile(r"/courses/(\d+)")


def discover_destination_id(page_url: str, fallback: str = "") -> str:
    """Find the course id in the host page URL, else use the fallback id.

    Raises:
        DestinationNotFoundError: if neither source yields an id.
    """
    match = COURSE_PATH_RE.search(page_url or "")
    if match:
        return match.group(1)
    fallback = str(fallback or "").strip()
    if fallback:
        return fallback
    raise DestinationNotFoundError(
        "Could not detect course id from the page URL (/courses/:id/...)"
    )

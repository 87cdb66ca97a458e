from abc import ABC, abstractmethod
from collections.abc import Callable
from urllib.parse import unquote

import httpx
from bs4 import BeautifulSoup

from canvas_uploader.logging.logger import Log

CSRF_META_NAMES = ("csrf-token", "csrfToken", "authenticity_token")
CSRF_COOKIE_NAME = "_csrf_token"


class BaseCredentialProvider(ABC):
    """Contract for reading credentials from an already-authenticated session."""

    @abstractmethod
    def csrf_token(self) -> str | None:
        """Return the CSRF token to echo back on authenticated calls, if any."""

    @abstractmethod
    def cookie_header(self) -> str | None:
        """Return the session ``Cookie`` header value, if any."""

    def auth_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        cookie = self.cookie_header()
        if cookie:
            headers["Cookie"] = cookie
        token = self.csrf_token()
        if token:
            headers["X-CSRF-Token"] = token
        return headers


def parse_cookie_header(cookie_header: str) -> dict[str, str]:
    cookies: dict[str, str] = {}
    for part in cookie_header.split(";"):
        name, sep, value = part.strip().partition("=")
        if sep and name:
            cookies[name] = value
    return cookies


def find_csrf_meta(page_html: str) -> str | None:
    soup = BeautifulSoup(page_html, "html.parser")
    for name in CSRF_META_NAMES:
        meta = soup.find("meta", attrs={"name": name})
        if meta and meta.get("content"):
            return meta["content"]
    return None


class AmbientCredentialProvider(BaseCredentialProvider):
    """Reuses the cookies and CSRF token of a logged-in browser session.

    The CSRF token is looked up in this order: ``<meta>`` tags of the host
    page, the explicitly configured token, then the ``_csrf_token`` cookie.
    """

    def __init__(
        self,
        session_cookie: str = "",
        configured_token: str = "",
        page_html_loader: Callable[[], str | None] | None = None,
    ) -> None:
        self._session_cookie = session_cookie.strip()
        self._configured_token = configured_token.strip()
        self._page_html_loader = page_html_loader
        self._resolved = False
        self._token: str | None = None

    def cookie_header(self) -> str | None:
        return self._session_cookie or None

    def csrf_token(self) -> str | None:
        if not self._resolved:
            self._token = self._resolve_token()
            self._resolved = True
        return self._token

    def _resolve_token(self) -> str | None:
        if self._page_html_loader is not None:
            page_html = self._page_html_loader()
            if page_html:
                token = find_csrf_meta(page_html)
                if token:
                    Log.debug("CSRF token taken from host page meta tag")
                    return token
        if self._configured_token:
            return self._configured_token
        cookie_token = parse_cookie_header(self._session_cookie).get(CSRF_COOKIE_NAME)
        if cookie_token:
            return unquote(cookie_token)
        Log.warning("No CSRF token found; authenticated calls may be rejected")
        return None


def host_page_loader(
    client: httpx.Client,
    page_url: str,
    session_cookie: str,
) -> Callable[[], str | None]:
    """Build a loader that fetches the host page with the session cookie."""

    def load() -> str | None:
        if not page_url:
            return None
        headers = {"Cookie": session_cookie} if session_cookie else {}
        try:
            response = client.get(page_url, headers=headers)
        except httpx.TransportError as exc:
            Log.warning(f"Could not load host page {page_url}: {exc}")
            return None
        if not response.is_success:
            Log.warning(f"Host page {page_url} answered HTTP {response.status_code}")
            return None
        return response.text

    return load

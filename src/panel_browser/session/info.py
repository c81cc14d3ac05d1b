"""Session state carried between sequential control panel requests."""

from __future__ import annotations

import logging
from http.cookiejar import CookieJar
from typing import Dict, List, Optional
from urllib.parse import urlsplit

import httpx

LOGGER = logging.getLogger(__name__)

COOKIE_URL = "https://cp.conoha.jp/"
SESSION_NAME = "ASP.NET_SessionId"
HIDDEN_PREFIX = "__"

DEFAULT_HEADERS: Dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10.10; rv:34.0) "
        "Gecko/20100101 Firefox/34.0"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.8,ja;q=0.6",
}

FormValues = Dict[str, List[str]]


class BrowserInfo:
    """Cookie jar, browser headers and the parameters threaded between actions."""

    def __init__(
        self,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        timeout: float = 30.0,
        follow_redirects: bool = True,
    ) -> None:
        self.transport = transport
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.values: FormValues = {}
        self._headers: Dict[str, str] = {}
        self._cookiejar = CookieJar()
        self.initialize_default()

    def initialize_default(self) -> None:
        """Reset headers, parameters and cookies to a fresh browser profile."""

        self._headers = dict(DEFAULT_HEADERS)
        self.values = {}
        self._cookiejar = CookieJar()

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self._headers)

    @property
    def cookies(self) -> httpx.Cookies:
        """An httpx view sharing the session's cookie jar."""

        return httpx.Cookies(self._cookiejar)

    def new_client(self) -> httpx.Client:
        """Open a client whose cookie store is the session jar itself."""

        # httpx shares a raw CookieJar but copies an httpx.Cookies instance.
        return httpx.Client(
            cookies=self._cookiejar,
            transport=self.transport,
            timeout=self.timeout,
            follow_redirects=self.follow_redirects,
        )

    def cookie_header(self, url: httpx.URL | str) -> str:
        """Return the ``Cookie`` value the jar would send to ``url``, or ``""``."""

        request = httpx.Request("GET", url)
        self.cookies.set_cookie_header(request)
        return request.headers.get("Cookie", "")

    def sid(self) -> str:
        for pair in self.cookie_header(COOKIE_URL).split(";"):
            name, _, value = pair.strip().partition("=")
            if name == SESSION_NAME:
                return value
        return ""

    def fix_sid(self, sid: str) -> None:
        """Force the session cookie, replacing whatever the panel issued."""

        host = urlsplit(COOKIE_URL).hostname or ""
        self.cookies.set(SESSION_NAME, sid, domain=host, path="/")
        LOGGER.debug("Session cookie fixed for %s", host)


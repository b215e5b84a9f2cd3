from __future__ import annotations

import urllib.request
from urllib.parse import urlsplit, urlunsplit


def http_base_from_ws(ws_url: str) -> str:
    """ws://host:port/ws -> http://host:port"""
    parts = urlsplit(ws_url)
    scheme = "https" if parts.scheme == "wss" else "http"
    return urlunsplit((scheme, parts.netloc, "", "", ""))


def fetch_session_cookie(ws_url: str, *, timeout_s: float = 10.0) -> str:
    """Create a board session over HTTP and return its `Cookie` header value."""
    url = http_base_from_ws(ws_url) + "/api/session"
    with urllib.request.urlopen(url, timeout=timeout_s) as resp:
        cookies = resp.headers.get_all("Set-Cookie") or []
    if not cookies:
        raise RuntimeError(f"{url} did not issue a session cookie")
    return "; ".join(c.split(";", 1)[0] for c in cookies)

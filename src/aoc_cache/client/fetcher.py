"""Authenticated HTTP retrieval used on a cache miss.

:class:`Fetcher` is the narrow boundary the cache depends on: given a URL
and a raw cookie string, return the response body as text or raise a
:class:`~aoc_cache.exceptions.FetchError`. :class:`HttpFetcher` implements
it with :class:`httpx.Client`:

- the URL must parse as an absolute ``http``/``https`` URL;
- the cookie string (``"session=abcd; other=x"``) is split into
  ``name=value`` pairs and sent as the ``Cookie`` header to the URL's host,
  ``localhost`` included, and to no other host;
- one GET is sent with a fixed identifying ``User-Agent``;
- transport failures and non-2xx responses are mapped to typed errors.

There is no retry: a failed fetch is reported once and
nothing is cached.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

import httpx

from aoc_cache.exceptions import (
    AuthError,
    ConnectionError_,
    CookieParseError,
    FetchError,
    NotFoundError,
    ServerError,
    UrlParseError,
)
from aoc_cache.models import RequestConfig
from aoc_cache.output import debug


class Fetcher(ABC):
    """Abstract network collaborator of :class:`~aoc_cache.cache.input_cache.InputCache`."""

    @abstractmethod
    def fetch(self, url: str, cookie: str) -> str:
        """Retrieve *url* authenticated with *cookie* and return the body text.

        Raises:
            UrlParseError: If *url* is not a valid absolute URL.
            CookieParseError: If *cookie* has no ``name=value`` pairs.
            FetchError: On transport failure or a non-success status.
        """


def parse_url(url: str) -> httpx.URL:
    """Parse *url* and require an absolute http(s) URL with a host."""
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise UrlParseError(f"url parse error: {url!r}: {exc}") from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise UrlParseError(f"url parse error: {url!r} is not an absolute http(s) URL")
    return parsed


def build_cookie_header(cookie: str) -> str:
    """Turn a raw cookie string into a normalised ``Cookie`` header value.

    ``"session=abcd"`` and ``"session=abcd; theme=dark"`` are both accepted.
    Empty segments (a trailing ``;``) are dropped and pairs are re-joined
    with ``"; "``. The header is attached per request rather than through a cookie
    jar, because the jar never sends cookies to single-label hosts such as
    ``localhost``.

    Raises:
        CookieParseError: If a segment has no ``=`` or an empty name, or no
            pair is found at all.
    """
    pairs: list[str] = []
    for segment in cookie.split(";"):
        segment = segment.strip()
        if not segment:
            continue
        name, sep, value = segment.partition("=")
        name = name.strip()
        if not sep or not name:
            raise CookieParseError(f"cookie parse error: segment {segment!r} is not name=value")
        pairs.append(f"{name}={value.strip()}")
    if not pairs:
        raise CookieParseError("cookie parse error: no name=value pairs found")
    return "; ".join(pairs)


class HttpFetcher(Fetcher):
    """:class:`Fetcher` backed by :class:`httpx.Client`.

    A fresh client is opened per fetch.

    Args:
        config: Timeout, SSL verification and User-Agent settings.
        transport: Optional :class:`httpx.BaseTransport`, used by tests to
            plug in :class:`httpx.MockTransport`.

    Example::

        fetcher = HttpFetcher()
        text = fetcher.fetch("https://adventofcode.com/2022/day/1/input", "session=abcd")
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config or RequestConfig()
        self._transport = transport

    def fetch(self, url: str, cookie: str) -> str:
        parsed = parse_url(url)
        cookie_header = build_cookie_header(cookie)

        def attach_cookie(request: httpx.Request) -> None:
            # Runs for every hop, redirects included; other hosts never see it.
            if request.url.host == parsed.host:
                request.headers["Cookie"] = cookie_header

        debug(f"GET {url}")
        try:
            with httpx.Client(
                headers={"User-Agent": self._config.user_agent},
                event_hooks={"request": [attach_cookie]},
                timeout=self._config.timeout,
                verify=self._config.verify_ssl,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = client.get(parsed)
                text = response.text
        except httpx.HTTPError as exc:
            raise ConnectionError_(f"Request to {url} failed: {exc}") from exc

        self._map_response_error(url, response)
        debug(f"Received {len(text)} characters from {url}")
        return text

    def _map_response_error(self, url: str, response: httpx.Response) -> None:
        """Raise a typed :class:`FetchError` for non-2xx statuses."""
        status = response.status_code
        if 200 <= status < 300:
            return

        detail = response.text.strip()[:200]
        msg = f"HTTP {status} for {url}: {detail}" if detail else f"HTTP {status} for {url}"

        if status in (401, 403):
            raise AuthError(msg, status_code=status)
        if status == 404:
            raise NotFoundError(msg, status_code=status)
        if status >= 400:
            raise ServerError(msg, status_code=status)
        raise FetchError(msg, status_code=status)

"""Tests for the httpx-backed fetcher."""

from __future__ import annotations

import httpx
import pytest

from aoc_cache.client.fetcher import HttpFetcher, build_cookie_header, parse_url
from aoc_cache.exceptions import (
    AuthError,
    ConnectionError_,
    CookieParseError,
    FetchError,
    NotFoundError,
    ServerError,
    UrlParseError,
)
from aoc_cache.models import DEFAULT_USER_AGENT, RequestConfig

URL = "https://adventofcode.example/2022/day/1/input"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _fetcher(handler) -> HttpFetcher:
    return HttpFetcher(RequestConfig(timeout=5), transport=httpx.MockTransport(handler))


def _text_handler(body: str, status_code: int = 200):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status_code, text=body)

    handler.seen = seen  # type: ignore[attr-defined]
    return handler


# ---------------------------------------------------------------------------
# URL parsing
# ---------------------------------------------------------------------------


class TestParseUrl:
    def test_absolute_https_url(self) -> None:
        parsed = parse_url(URL)
        assert parsed.host == "adventofcode.example"
        assert parsed.path == "/2022/day/1/input"

    @pytest.mark.parametrize(
        "url",
        ["", "not a url", "/2022/day/1/input", "ftp://example.test/file", "https://"],
    )
    def test_invalid_urls_raise(self, url: str) -> None:
        with pytest.raises(UrlParseError):
            parse_url(url)


# ---------------------------------------------------------------------------
# Cookie header
# ---------------------------------------------------------------------------


class TestCookieHeader:
    def test_single_cookie(self) -> None:
        assert build_cookie_header("session=abcd") == "session=abcd"

    def test_multiple_cookies_and_trailing_semicolon(self) -> None:
        assert build_cookie_header(" session=abcd ;theme=dark;") == "session=abcd; theme=dark"

    def test_value_may_contain_equals(self) -> None:
        assert build_cookie_header("session=ab==") == "session=ab=="

    @pytest.mark.parametrize("cookie", ["abcd", "=abcd", ";;", "session=abcd; broken"])
    def test_unparsable_cookie_raises(self, cookie: str) -> None:
        with pytest.raises(CookieParseError):
            build_cookie_header(cookie)


# ---------------------------------------------------------------------------
# Fetch
# ---------------------------------------------------------------------------


class TestFetch:
    def test_returns_body_text_untrimmed(self) -> None:
        handler = _text_handler(" 42\n")
        assert _fetcher(handler).fetch(URL, "session=x") == " 42\n"

    def test_sends_cookie_and_user_agent(self) -> None:
        handler = _text_handler("ok")
        _fetcher(handler).fetch(URL, "session=x")

        request = handler.seen[0]
        assert request.method == "GET"
        assert str(request.url) == URL
        assert request.headers["cookie"] == "session=x"
        assert request.headers["user-agent"] == DEFAULT_USER_AGENT

    @pytest.mark.parametrize(
        "url",
        ["http://localhost:8000/2022/day/1/input", "http://aoc/2022/day/1/input"],
    )
    def test_sends_cookie_to_single_label_hosts(self, url: str) -> None:
        handler = _text_handler("ok")
        _fetcher(handler).fetch(url, "session=x")
        assert handler.seen[0].headers.get("cookie") == "session=x"

    def test_cookie_survives_redirect(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if request.url.path == "/old":
                return httpx.Response(302, headers={"Location": URL})
            return httpx.Response(200, text="moved")

        text = _fetcher(handler).fetch("https://adventofcode.example/old", "session=x")
        assert text == "moved"
        assert [r.headers.get("cookie") for r in seen] == ["session=x", "session=x"]

    def test_cookie_not_sent_to_other_hosts(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if request.url.host == "adventofcode.example":
                return httpx.Response(302, headers={"Location": "https://elsewhere.example/x"})
            return httpx.Response(200, text="elsewhere")

        _fetcher(handler).fetch(URL, "session=x")
        assert [r.headers.get("cookie") for r in seen] == ["session=x", None]

    def test_custom_user_agent(self) -> None:
        handler = _text_handler("ok")
        config = RequestConfig(user_agent="me@example.test via aoc_cache")
        HttpFetcher(config, transport=httpx.MockTransport(handler)).fetch(URL, "session=x")
        assert handler.seen[0].headers["user-agent"] == "me@example.test via aoc_cache"

    def test_invalid_url_makes_no_request(self) -> None:
        handler = _text_handler("ok")
        with pytest.raises(UrlParseError):
            _fetcher(handler).fetch("not a url", "session=x")
        assert handler.seen == []

    def test_bad_cookie_makes_no_request(self) -> None:
        handler = _text_handler("ok")
        with pytest.raises(CookieParseError):
            _fetcher(handler).fetch(URL, "nonsense")
        assert handler.seen == []


class TestErrorMapping:
    @pytest.mark.parametrize(
        ("status", "exc_type"),
        [
            (400, ServerError),
            (401, AuthError),
            (403, AuthError),
            (404, NotFoundError),
            (429, ServerError),
            (500, ServerError),
            (503, ServerError),
        ],
    )
    def test_status_mapping(self, status: int, exc_type: type) -> None:
        handler = _text_handler("Puzzle inputs differ by user.", status_code=status)
        with pytest.raises(exc_type) as info:
            _fetcher(handler).fetch(URL, "session=x")
        assert isinstance(info.value, FetchError)
        assert info.value.status_code == status
        assert f"HTTP {status}" in str(info.value)

    def test_no_retry_on_server_error(self) -> None:
        handler = _text_handler("down", status_code=500)
        with pytest.raises(ServerError):
            _fetcher(handler).fetch(URL, "session=x")
        assert len(handler.seen) == 1

    def test_transport_error_maps_to_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ConnectionError_) as info:
            _fetcher(handler).fetch(URL, "session=x")
        assert info.value.status_code is None

    def test_timeout_maps_to_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(ConnectionError_):
            _fetcher(handler).fetch(URL, "session=x")

"""Fetch-once cache orchestration.

:class:`InputCache` ties a :class:`~aoc_cache.cache.index.CacheIndex` to a
:class:`~aoc_cache.client.fetcher.Fetcher`:

1. Look the URL up in the index. On a hit, return the stored file exactly
   as written. The cookie is not looked at and no request is made.
2. On a miss, reject an empty cookie, fetch the URL, strip surrounding
   whitespace, record the stripped text, and return it.

Every failure propagates to the caller; nothing is returned unless it was
fully read from disk or fully fetched and recorded.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Optional

from aoc_cache.cache.index import CacheIndex
from aoc_cache.client.fetcher import Fetcher, HttpFetcher
from aoc_cache.exceptions import CacheIOError, InvalidCookieError
from aoc_cache.output import debug

# Unicode White_Space. str.strip() would also drop the \x1c-\x1f separators.
WHITESPACE = (
    "\t\n\x0b\x0c\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)

_locks: dict[Path, threading.Lock] = {}
_locks_guard = threading.Lock()


def lock_for(cache_dir: str | Path) -> threading.Lock:
    """Return the process-wide lock for *cache_dir*, creating it on first use.

    Paths are resolved first, so ``cache`` and ``./cache`` share a lock.
    """
    key = Path(cache_dir).resolve()
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.Lock()
        return lock


class InputCache:
    """Serve URLs from disk, fetching each one at most once.

    Lookup, fetch and record run under the lock from :func:`lock_for`, which
    every instance over the same directory shares. Two threads missing on
    the same URL therefore cannot both record it, even through separate
    instances.
    Separate processes sharing a cache directory are not coordinated.

    Args:
        cache_dir: Directory for the index and entry files.
        fetcher: Network collaborator used on a miss. Defaults to
            :class:`~aoc_cache.client.fetcher.HttpFetcher`.

    Example::

        cache = InputCache(Path("~/.cache/aoc_cache").expanduser())
        text = cache.get("https://adventofcode.com/2022/day/1/input", "session=abcd")
    """

    def __init__(self, cache_dir: str | Path, fetcher: Optional[Fetcher] = None) -> None:
        self._index = CacheIndex(cache_dir)
        self._fetcher = fetcher or HttpFetcher()
        self._lock = lock_for(cache_dir)

    @property
    def index(self) -> CacheIndex:
        return self._index

    def get(self, url: str, cookie: str) -> str:
        """Return the content for *url*, from disk if it was fetched before.

        Args:
            url: Absolute URL, used verbatim as the cache key.
            cookie: Raw cookie string such as ``"session=abcd..."`` without a
                trailing newline. Only consulted on a miss.

        Returns:
            The cached text on a hit, or the whitespace-stripped response
            body on a miss.

        Raises:
            InvalidCookieError: On a miss with an empty cookie.
            UrlParseError: If the URL is not a valid absolute URL (miss only).
            CookieParseError: If the cookie has no ``name=value`` pairs.
            FetchError: If the request fails or returns a non-2xx status.
            IndexParseError: If the index holds a malformed line.
            DuplicateEntryError: If the URL was recorded between lookup and
                record.
            CachePathError: If the entry path cannot be stored in the index.
            CacheIOError: On any filesystem failure.
        """
        with self._lock:
            cached = self._read_cached(url)
            if cached is not None:
                debug(f"Cache hit: {url}")
                return cached

            debug(f"Cache miss: {url}, requesting from web")
            if not cookie:
                raise InvalidCookieError(
                    f"An empty cookie cannot authenticate the request for {url}"
                )

            content = self._fetcher.fetch(url, cookie).strip(WHITESPACE)
            self._index.record(url, content)
            debug(f"Returning content from web: {url}")
            return content

    def _read_cached(self, url: str) -> Optional[str]:
        path = self._index.lookup(url)
        if path is None:
            return None
        debug(f"Cache file path: {path}")
        try:
            with open(path, encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise CacheIOError(f"Cannot read cache file {path} for {url}: {exc}") from exc


def get_input_from_web_or_cache(url: str, cookie: str) -> str:
    """Get the content of *url* from the default cache, fetching it on first use.

    The url can be, e.g., ``https://adventofcode.com/2022/day/1/input``. The
    cookie is the one your browser sends to the site, shaped like
    ``session=abcd...`` with no trailing newline.

    The cache directory is resolved with
    :func:`~aoc_cache.config.resolve_cache_dir`, honouring ``AOC_CACHE_DIR``
    and the global config, and defaulting to ``<XDG cache>/aoc_cache``.

    Example::

        from aoc_cache import get_input_from_web_or_cache

        cookie = Path("my.cookie").read_text().strip()
        text = get_input_from_web_or_cache(
            "https://adventofcode.com/2022/day/1/input", cookie
        )  # from the web on the first run, from disk afterwards
    """
    from aoc_cache.config import load_global_config, resolve_cache_dir

    config = load_global_config()
    cache = InputCache(resolve_cache_dir(config), HttpFetcher(config.request))
    return cache.get(url, cookie)

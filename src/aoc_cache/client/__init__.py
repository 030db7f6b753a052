"""Network side of the cache: the :class:`Fetcher` boundary and its httpx implementation."""

from aoc_cache.client.fetcher import Fetcher, HttpFetcher

__all__ = ["Fetcher", "HttpFetcher"]

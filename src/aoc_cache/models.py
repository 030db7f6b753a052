"""Pydantic models shared across aoc_cache modules.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig` and :class:`GlobalConfig`.

**Cache models** -- produced while reading the on-disk index:
    :class:`IndexRecord`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from aoc_cache import __version__

DEFAULT_USER_AGENT = f"aoc_cache/{__version__} (python-httpx; input cache)"


class RequestConfig(BaseModel):
    """HTTP settings used by :class:`~aoc_cache.client.fetcher.HttpFetcher` on a cache miss."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT, description="User-Agent header sent with every fetch"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/aoc_cache/config.json``.

    Loaded and saved by :func:`~aoc_cache.config.load_global_config` and
    :func:`~aoc_cache.config.save_global_config`. ``cache_dir`` is overridden
    by the ``AOC_CACHE_DIR`` environment variable and the ``--cache-dir`` flag.
    """

    cache_dir: Optional[str] = Field(
        default=None, description="Cache directory (defaults to the XDG cache dir)"
    )
    cookie_source: str = Field(
        default="env:AOC_COOKIE",
        description="Where the CLI reads the session cookie: env:, file:, prompt, literal:",
    )
    request: RequestConfig = Field(default_factory=RequestConfig)


class IndexRecord(BaseModel):
    """One ``<url>: <path>`` line of the index file."""

    url: str
    path: Path
    line_number: int = Field(description="1-based line number in index.cache")

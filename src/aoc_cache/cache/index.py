"""Append-only on-disk index mapping URLs to cache-entry files.

Layout inside the cache directory::

    index.cache                      one "<url>: <path>" line per cached URL
    cache_<u64-decimal-hash>.cache   the body fetched for one URL

The index is the source of truth. Lines are only ever appended; nothing
here rewrites, compacts or deletes them. Lookups scan the file in order and
the first record whose URL matches exactly wins, so a colliding filename
can never be served for the wrong URL unless two URLs also share an index
line.

Filenames use a 64-bit ``blake2b`` digest rendered as an unsigned decimal.
The built-in :func:`hash` is salted per process and would orphan every
entry on the next run.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterator
from pathlib import Path
from typing import Optional

from aoc_cache.exceptions import (
    CacheIOError,
    CachePathError,
    DuplicateEntryError,
    IndexParseError,
)
from aoc_cache.models import IndexRecord
from aoc_cache.output import debug

INDEX_FILE_NAME = "index.cache"
RECORD_SEPARATOR = ": "


def encode_url(url: str) -> str:
    """Return the decimal string of a stable 64-bit hash of *url*."""
    digest = hashlib.blake2b(url.encode("utf-8"), digest_size=8).digest()
    return str(int.from_bytes(digest, "big"))


def filename_for(url: str) -> str:
    """Return the cache-entry filename for *url* (``cache_<hash>.cache``)."""
    return f"cache_{encode_url(url)}.cache"


def parse_index_line(line: str, line_number: int = 0) -> IndexRecord:
    """Parse one index line into an :class:`IndexRecord`.

    Raises:
        IndexParseError: If splitting on ``": "`` does not give exactly
            two parts.
    """
    parts = line.split(RECORD_SEPARATOR)
    if len(parts) != 2:
        raise IndexParseError(f"could not parse index line {line_number}: `{line}`")
    return IndexRecord(url=parts[0], path=Path(parts[1]), line_number=line_number)


class CacheIndex:
    """Durable URL -> cache-file resolution for one cache directory.

    The directory and the index file are created lazily on first use.
    Instances hold no state besides the directory, so several instances
    over the same directory see each other's writes.

    Args:
        cache_dir: Directory holding ``index.cache`` and the entry files.

    Example::

        index = CacheIndex(tmp_path)
        if index.lookup(url) is None:
            index.record(url, "1721\\n979")
    """

    def __init__(self, cache_dir: str | Path) -> None:
        self._cache_dir = Path(cache_dir)

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    @property
    def index_path(self) -> Path:
        return self._cache_dir / INDEX_FILE_NAME

    def path_for(self, url: str) -> Path:
        """Where the entry file for *url* lives (or would live)."""
        return self._cache_dir / filename_for(url)

    def ensure_index(self) -> Path:
        """Create the cache directory and an empty index if missing.

        Returns:
            Path to ``index.cache``.

        Raises:
            CacheIOError: If either cannot be created.
        """
        index_path = self.index_path
        try:
            if index_path.exists():
                debug(f"Index already exists at {index_path}")
            else:
                self._cache_dir.mkdir(parents=True, exist_ok=True)
                index_path.touch()
                debug(f"Created empty index at {index_path}")
        except OSError as exc:
            raise CacheIOError(f"Cannot create index {index_path}: {exc}") from exc
        return index_path

    def records(self) -> Iterator[IndexRecord]:
        """Yield every index record in file order.

        Raises:
            IndexParseError: On the first malformed line.
            CacheIOError: If the index cannot be read.
        """
        index_path = self.ensure_index()
        try:
            with open(index_path, encoding="utf-8") as f:
                for line_number, line in enumerate(f, start=1):
                    yield parse_index_line(line.rstrip("\n"), line_number)
        except (OSError, UnicodeDecodeError) as exc:
            raise CacheIOError(f"Cannot read index {index_path}: {exc}") from exc

    def lookup(self, url: str) -> Optional[Path]:
        """Return the entry path recorded for *url*, or ``None``.

        The match is byte-exact: no scheme folding, no trailing-slash
        normalisation. Lines are scanned up to the first match; a malformed
        line before it aborts the whole lookup instead of being skipped.

        Raises:
            IndexParseError: If a scanned line is malformed.
            CacheIOError: If the index cannot be created or read.
        """
        for record in self.records():
            if record.url == url:
                debug(f"Index line {record.line_number} maps {url} to {record.path}")
                return record.path
        return None

    def record(self, url: str, content: str) -> Path:
        """Store *content* for *url* and append its index line.

        The content file is written first, then the index line is appended
        and flushed. If the path cannot be written to the index as UTF-8
        text, the content file stays behind without an index line; the next
        ``record`` for the same URL overwrites it.

        Args:
            url: The exact URL key.
            content: Text written verbatim, with no newline added.

        Returns:
            Path of the written entry file.

        Raises:
            DuplicateEntryError: If *url* already has a record. Nothing is
                written.
            IndexParseError: If *url* contains the record separator or a
                line break, which would corrupt the index.
            CachePathError: If the entry path is not representable as text.
            CacheIOError: On any write failure.
        """
        if self.lookup(url) is not None:
            message = f"found cache entry for {url} when attempting to add new cache for it"
            debug(message)
            raise DuplicateEntryError(message)
        if RECORD_SEPARATOR in url or "\n" in url or "\r" in url:
            raise IndexParseError(f"cannot record {url!r}: it would not parse back from the index")

        entry_path = self.path_for(url)
        try:
            with open(entry_path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as exc:
            raise CacheIOError(f"Cannot write cache file {entry_path}: {exc}") from exc
        debug(f"Wrote content (size={len(content)}) to {entry_path}")

        entry_text = str(entry_path)
        try:
            entry_text.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise CachePathError(
                f"Cache file path {entry_path!r} cannot be written to the index as UTF-8"
            ) from exc

        index_line = f"{url}{RECORD_SEPARATOR}{entry_text}"
        try:
            with open(self.index_path, "a", encoding="utf-8", newline="") as f:
                f.write(index_line + "\n")
                f.flush()
        except OSError as exc:
            raise CacheIOError(f"Cannot append to index {self.index_path}: {exc}") from exc
        debug(f"Wrote `{index_line}` to {self.index_path}")
        return entry_path

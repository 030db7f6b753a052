"""Exception hierarchy for aoc_cache.

All exceptions inherit from :class:`AocCacheError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`aoc_cache.exit_codes`.
Library callers catch ``AocCacheError`` (or a specific subclass); the CLI
entry point in :func:`aoc_cache.app.main` turns it into a process exit code.

Subclass hierarchy::

    AocCacheError (exit 1)
    +-- UrlParseError        (exit 2)
    +-- InvalidCookieError   (exit 2)
    +-- CookieParseError     (exit 2)
    +-- FetchError           (exit 6)
    |   +-- AuthError        (exit 3)
    |   +-- NotFoundError    (exit 4)
    |   +-- ServerError      (exit 5)
    |   +-- ConnectionError_ (exit 6)
    +-- CacheIOError         (exit 7)
    +-- IndexParseError      (exit 8)
    +-- DuplicateEntryError  (exit 8)
    +-- CachePathError       (exit 8)
    +-- ConfigError          (exit 1)
"""

from __future__ import annotations

from aoc_cache.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CACHE_CORRUPT,
    EXIT_CACHE_IO_ERROR,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class AocCacheError(Exception):
    """Base exception for all aoc_cache errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`aoc_cache.exit_codes`.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class UrlParseError(AocCacheError):
    """Raised when the requested URL is not a valid absolute URL."""

    exit_code = EXIT_INVALID_USAGE


class InvalidCookieError(AocCacheError):
    """Raised on a cache miss when the cookie string is empty."""

    exit_code = EXIT_INVALID_USAGE


class CookieParseError(AocCacheError):
    """Raised when the cookie string cannot be split into ``name=value`` pairs."""

    exit_code = EXIT_INVALID_USAGE


class FetchError(AocCacheError):
    """Raised when the remote fetch fails.

    Args:
        message: Human-readable error description.
        status_code: HTTP status of the failed response, or ``None`` for
            transport-level failures.
    """

    exit_code = EXIT_CONNECTION_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthError(FetchError):
    """Raised when the server rejects the cookie (HTTP 401 / 403)."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(FetchError):
    """Raised when the server returns HTTP 404."""

    exit_code = EXIT_NOT_FOUND


class ServerError(FetchError):
    """Raised for any other non-success HTTP status."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(FetchError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class CacheIOError(AocCacheError):
    """Raised when a cache file or the index cannot be read, created or written."""

    exit_code = EXIT_CACHE_IO_ERROR


class IndexParseError(AocCacheError):
    """Raised when an index line does not have the ``<url>: <path>`` shape."""

    exit_code = EXIT_CACHE_CORRUPT


class DuplicateEntryError(AocCacheError):
    """Raised when recording a URL that already has an index record."""

    exit_code = EXIT_CACHE_CORRUPT


class CachePathError(AocCacheError):
    """Raised when a cache file path cannot be written into the index as text."""

    exit_code = EXIT_CACHE_CORRUPT


class ConfigError(AocCacheError):
    """Raised for configuration problems (invalid JSON, bad cookie sources)."""

    exit_code = EXIT_GENERIC_FAILURE

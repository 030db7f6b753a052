"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~aoc_cache.exceptions.AocCacheError` subclass.
Shell wrappers can inspect the exit code to tell a bad cookie from a
corrupt cache without parsing stderr.

Example::

    $ aoc-cache get https://adventofcode.com/2022/day/1/input
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- the session cookie was rejected
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""Bad input: malformed URL, empty or unparsable cookie."""

EXIT_AUTH_FAILURE = 3
"""The remote server rejected the credential (HTTP 401/403)."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The remote server answered with another non-success status."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_CACHE_IO_ERROR = 7
"""A cache file or the index could not be read or written."""

EXIT_CACHE_CORRUPT = 8
"""The index is malformed or would become inconsistent (parse, duplicate, path)."""

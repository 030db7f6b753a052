"""aoc_cache -- fetch a puzzle input once, then serve it from disk forever.

A small persistent response cache for authenticated GET requests such as
Advent of Code puzzle inputs. The first request for a URL is fetched with
the caller's session cookie and written to a cache directory; every later
request for the same URL is answered from disk without contacting the
server, which keeps load off the site.

Typical use::

    from aoc_cache import get_input_from_web_or_cache

    cookie = open("my.cookie").read().strip()  # "session=abcd..."
    text = get_input_from_web_or_cache(
        "https://adventofcode.com/2022/day/1/input", cookie
    )

Modules:
    cache: The on-disk index and the :class:`InputCache` orchestrator.
    client: The HTTP fetcher used on a cache miss.
    config: XDG-aware directories, global config, cookie resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr diagnostics with Rich support.
    app: Typer CLI entry point.
"""

__version__ = "0.3.0"

from aoc_cache.cache.input_cache import InputCache, get_input_from_web_or_cache  # noqa: E402
from aoc_cache.exceptions import AocCacheError  # noqa: E402

__all__ = [
    "AocCacheError",
    "InputCache",
    "__version__",
    "get_input_from_web_or_cache",
]

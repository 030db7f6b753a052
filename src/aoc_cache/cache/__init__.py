"""On-disk cache for fetched inputs.

:class:`CacheIndex` owns the append-only ``index.cache`` file and the
``cache_<hash>.cache`` entry files. :class:`InputCache` is the public
entry point that consults the index and falls back to a
:class:`~aoc_cache.client.fetcher.Fetcher` on a miss.
"""

from aoc_cache.cache.index import CacheIndex, filename_for
from aoc_cache.cache.input_cache import InputCache, get_input_from_web_or_cache

__all__ = ["CacheIndex", "InputCache", "filename_for", "get_input_from_web_or_cache"]

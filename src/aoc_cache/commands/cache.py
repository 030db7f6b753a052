"""Cache commands -- ``get``, ``index`` and ``where``.

``get`` is the CLI face of :meth:`~aoc_cache.cache.input_cache.InputCache.get`:
the content goes to stdout byte for byte, with no newline added, so
``aoc-cache get URL > input.txt`` reproduces the cached file exactly,
and failures exit with the error's code from :mod:`aoc_cache.exit_codes`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from aoc_cache.exceptions import AocCacheError
from aoc_cache.output import error, info, print_data, print_table, write_data


def _cache_dir_from_ctx(ctx: typer.Context) -> Path:
    from aoc_cache.config import load_global_config, resolve_cache_dir

    cli_cache_dir = ctx.obj.get("cache_dir") if ctx.obj else None
    return resolve_cache_dir(load_global_config(), cli_cache_dir)


def get_command(
    ctx: typer.Context,
    url: str = typer.Argument(help="URL to fetch, e.g. https://adventofcode.com/2022/day/1/input"),
    cookie: Optional[str] = typer.Option(
        None, "--cookie", help="Raw cookie string, e.g. 'session=abcd...'."
    ),
    cookie_source: Optional[str] = typer.Option(
        None,
        "--cookie-source",
        help="Cookie source (env:VAR, file:PATH, prompt, literal:VALUE). Defaults to config.",
    ),
) -> None:
    """Print the content of URL, fetching it only if it is not cached yet.

    The cookie is only resolved when the URL is missing from the cache, so a
    cached input can be printed without any credential configured.

    Example::

        aoc-cache get https://adventofcode.com/2022/day/1/input --cookie-source file:~/my.cookie
    """
    from aoc_cache.cache import InputCache
    from aoc_cache.client import HttpFetcher
    from aoc_cache.config import load_global_config, resolve_cache_dir, resolve_cookie

    try:
        config = load_global_config()
        cli_cache_dir = ctx.obj.get("cache_dir") if ctx.obj else None
        cache = InputCache(
            resolve_cache_dir(config, cli_cache_dir), HttpFetcher(config.request)
        )
        if cookie is None and cache.index.lookup(url) is None:
            cookie = resolve_cookie(cookie_source or config.cookie_source)
        content = cache.get(url, cookie or "")
    except AocCacheError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    write_data(content)


def index_command(ctx: typer.Context) -> None:
    """List the cached URLs and the files holding their content."""
    from aoc_cache.cache import CacheIndex

    try:
        index = CacheIndex(_cache_dir_from_ctx(ctx))
        records = list(index.records())
    except AocCacheError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    if not records:
        info(f"No cached entries in {index.cache_dir}")
        return
    print_table(
        ["url", "path"],
        [[r.url, str(r.path)] for r in records],
        title=f"{len(records)} cached entries",
    )


def where_command(ctx: typer.Context) -> None:
    """Print the resolved cache directory."""
    try:
        cache_dir = _cache_dir_from_ctx(ctx)
    except AocCacheError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    print_data(str(cache_dir))

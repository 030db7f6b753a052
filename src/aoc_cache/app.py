"""Typer application and CLI entry point for aoc_cache.

The CLI is a thin shell over :class:`~aoc_cache.cache.input_cache.InputCache`:
``get`` prints one URL's content (fetching it on first use), ``index`` lists
what is cached, ``where`` prints the cache directory, and ``config`` manages
the global configuration file.

:func:`main` is the console-script entry point declared in
``pyproject.toml``. Library errors exit with their ``exit_code``; anything
unexpected is written to a crash log under the data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from aoc_cache import __version__
from aoc_cache.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="aoc-cache",
    help="Fetch authenticated inputs once and serve them from a local cache.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"aoc-cache {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    cache_dir: Optional[str] = typer.Option(
        None, "--cache-dir", help="Cache directory (overrides AOC_CACHE_DIR and config)."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Install the global output manager and stash shared options in ``ctx.obj``."""
    from aoc_cache.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["cache_dir"] = cache_dir
    ctx.obj["verbose"] = verbose


def _register_commands() -> None:
    from aoc_cache.commands.cache import get_command, index_command, where_command
    from aoc_cache.commands.config import config_app

    app.command("get")(get_command)
    app.command("index")(index_command)
    app.command("where")(where_command)
    app.add_typer(config_app, name="config", help="Configuration management.")


_register_commands()


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback to ``<data dir>/logs/`` and return its path."""
    from aoc_cache.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(f"{type(exc).__name__}: {exc}\n\n{traceback.format_exc()}")
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``aoc-cache`` console script.

    Commands already turn cache errors into exit codes. Anything escaping
    them lands here: :class:`~aoc_cache.exceptions.AocCacheError` prints its
    message and exits with its ``exit_code``, other exceptions produce a
    crash log and exit with :data:`~aoc_cache.exit_codes.EXIT_GENERIC_FAILURE`.
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from aoc_cache.exceptions import AocCacheError
        from aoc_cache.output import error

        if isinstance(exc, AocCacheError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)

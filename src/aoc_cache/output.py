"""Terminal output for aoc_cache: data on stdout, diagnostics on stderr.

Cached content is the only thing ``aoc-cache get`` writes to stdout, and it
is written byte for byte (:meth:`OutputManager.write_data`), so the command
can be redirected straight into an input file. Everything else (hit/miss
traces, errors, confirmations) goes to stderr.

The cache core reports through the module-level :func:`debug` helper and
never prints directly. Library callers get a default manager whose debug
level is off; the CLI installs its own with :func:`set_output`.

Colour is dropped when ``NO_COLOR`` is set, ``TERM=dumb``, or
``--no-color`` is given.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, NamedTuple, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table


class OutputFormat(str, Enum):
    """How listings and config dumps are rendered.

    ``AUTO`` means ``RICH`` on an interactive, colour-capable terminal and
    ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class _Level(NamedTuple):
    markup: str
    prefix: str
    quiet_hides: bool


_LEVELS = {
    "debug": _Level("[dim]\\[debug] {}[/dim]", "[debug] ", True),
    "info": _Level("{}", "", True),
    "success": _Level("[green]{}[/green]", "", True),
    "error": _Level("[bold red]Error:[/bold red] {}", "Error: ", False),
}


class OutputManager:
    """Renders cache data and diagnostics for one CLI invocation.

    Args:
        format: Rendering for listings and config dumps.
        no_color: Plain stderr lines, no Rich markup.
        quiet: Hide info and success lines. Errors always show.
        verbose: Show cache traces (hits, misses, paths, requests).
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose
        if format == OutputFormat.AUTO:
            rich_ok = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        self._format = format
        self._console = Console(file=sys.stdout, no_color=self._no_color)
        self._err_console = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # -- stdout ---------------------------------------------------------- #

    def write_data(self, text: str) -> None:
        """Write *text* to stdout exactly, adding nothing."""
        sys.stdout.write(text)
        sys.stdout.flush()

    def print_data(self, text: str) -> None:
        """Write *text* to stdout as one line."""
        self.write_data(text + "\n")

    def print_record(self, data: dict[str, Any]) -> None:
        """Show a flat or nested mapping, such as the global config."""
        if self._format == OutputFormat.JSON:
            self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))
            return
        pairs = list(_flatten(data))
        if self._format == OutputFormat.PLAIN:
            for key, value in pairs:
                self.print_data(f"{key}\t{value}")
            return
        table = Table(show_header=False, box=None)
        table.add_column(style="bold cyan")
        table.add_column()
        for key, value in pairs:
            table.add_row(escape(key), escape(str(value)))
        self._console.print(table)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Show index records: a Rich table, JSON objects, or TSV lines."""
        if self._format == OutputFormat.JSON:
            objects = [dict(zip(headers, row)) for row in rows]
            self.print_data(json.dumps(objects, indent=2, ensure_ascii=False))
        elif self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
        else:
            table = Table(*headers, title=title, header_style="bold cyan")
            for row in rows:
                table.add_row(*(escape(cell) for cell in row))
            self._console.print(table)

    # -- stderr ---------------------------------------------------------- #

    def debug(self, message: str) -> None:
        if self._verbose:
            self._notify("debug", message)

    def info(self, message: str) -> None:
        self._notify("info", message)

    def success(self, message: str) -> None:
        self._notify("success", message)

    def error(self, message: str) -> None:
        self._notify("error", message)

    def _notify(self, level: str, message: str) -> None:
        style = _LEVELS[level]
        if self._quiet and style.quiet_hides:
            return
        if self._no_color:
            sys.stderr.write(f"{style.prefix}{message}\n")
            sys.stderr.flush()
        else:
            # URLs and paths may contain brackets.
            self._err_console.print(style.markup.format(escape(message)), highlight=False)


def _flatten(data: dict[str, Any], prefix: str = ""):
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            yield from _flatten(value, dotted + ".")
        else:
            yield dotted, value


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """The process-wide manager, built with defaults on first use."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the current manager. Tests call this between CLI runs."""
    global _output
    _output = None


def write_data(text: str) -> None:
    get_output().write_data(text)


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_record(data: dict[str, Any]) -> None:
    get_output().print_record(data)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def debug(message: str) -> None:
    get_output().debug(message)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)

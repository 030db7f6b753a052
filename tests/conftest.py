"""Shared test fixtures for aoc_cache.

Provides an isolated cache directory, a recording fake fetcher, isolated
XDG/config environments, and CLI runner helpers.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from aoc_cache.client.fetcher import Fetcher
from aoc_cache.exceptions import FetchError
from aoc_cache.output import OutputFormat, OutputManager, reset_output, set_output


class FakeFetcher(Fetcher):
    """In-memory :class:`Fetcher` that records every call.

    Args:
        responses: Map of URL to body text. Unknown URLs raise
            :class:`FetchError` with status 404.
    """

    def __init__(self, responses: dict[str, str] | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[tuple[str, str]] = []

    def fetch(self, url: str, cookie: str) -> str:
        self.calls.append((url, cookie))
        if url not in self.responses:
            raise FetchError(f"HTTP 404 for {url}", status_code=404)
        return self.responses[url]


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The manager caches sys.stdout/sys.stderr at creation time; CliRunner
    swaps those streams, so a stale manager would write to closed files.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Cache fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """A fresh, not-yet-created cache directory."""
    return tmp_path / "aoc_cache"


@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher(
        {
            "https://example.test/a": " 42\n",
            "https://example.test/2022/day/1/input": "1000\n2000\n\n3000\n",
        }
    )


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG directories at tmp_path and clear AOC_* variables.

    Returns:
        The tmp_path root directory.
    """
    monkeypatch.setattr("aoc_cache.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["AOC_CACHE_DIR", "AOC_COOKIE"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def verbose_output() -> OutputManager:
    """Plain, uncoloured, verbose output so debug traces reach stderr."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, verbose=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner(isolated_config: Path):
    from typer.testing import CliRunner

    return CliRunner()

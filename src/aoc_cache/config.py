"""Configuration management with XDG paths, atomic writes, and cookie resolution.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.aoc_cache/`` on macOS and Windows. See :func:`get_config_dir`,
  :func:`get_data_dir` and :func:`directory_for`.
* **Cache directory** -- :func:`directory_for` maps a namespace (always
  ``"aoc_cache"`` in practice) to a persistent directory under the user
  cache root; :func:`resolve_cache_dir` layers the ``AOC_CACHE_DIR``
  environment variable and the global config on top of it.
* **Global config** -- a single :class:`~aoc_cache.models.GlobalConfig`
  JSON file, written with :func:`_atomic_write`.
* **Cookie resolution** -- :func:`resolve_cookie` reads the session cookie
  from an env var, a file, an interactive prompt or a literal value.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Optional

from aoc_cache.exceptions import ConfigError
from aoc_cache.models import GlobalConfig

_APP_NAME = "aoc_cache"
_CONFIG_FILENAME = "config.json"
CACHE_NAMESPACE = "aoc_cache"
CACHE_DIR_ENV = "AOC_CACHE_DIR"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform follows the XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/aoc_cache/`` (default ``~/.config/aoc_cache/``).
    On macOS/Windows: ``~/.aoc_cache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_root() -> Path:
    """Return the per-user cache root that namespaces live under.

    On Linux/BSD: ``$XDG_CACHE_HOME`` (default ``~/.cache``).
    On macOS/Windows: ``~/.aoc_cache/cache``.
    """
    if _is_xdg_platform():
        return _xdg_base("XDG_CACHE_HOME", (".cache",))
    return _fallback_base_dir() / "cache"


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/aoc_cache/`` (default ``~/.local/share/aoc_cache/``).
    On macOS/Windows: ``~/.aoc_cache/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def directory_for(namespace: str = CACHE_NAMESPACE) -> Path:
    """Return the persistent directory for *namespace*, creating it if necessary.

    The result depends only on the environment and the namespace, so repeated
    calls within a process agree, and the directory survives across runs.

    Args:
        namespace: Sub-directory name under the cache root.

    Returns:
        Absolute path to ``<cache root>/<namespace>`` (guaranteed to exist).

    Raises:
        ConfigError: If *namespace* is empty or not a single path segment.
    """
    if not namespace or Path(namespace).name != namespace:
        raise ConfigError(f"Invalid cache namespace: {namespace!r}")
    path = get_cache_root() / namespace
    path.mkdir(parents=True, exist_ok=True)
    return path


def resolve_cache_dir(
    config: Optional[GlobalConfig] = None,
    cli_cache_dir: Optional[str] = None,
) -> Path:
    """Resolve the cache directory with full precedence.

    Precedence (high to low):
        1. ``cli_cache_dir`` (the ``--cache-dir`` flag)
        2. ``AOC_CACHE_DIR`` environment variable
        3. ``cache_dir`` in the global config
        4. :func:`directory_for` ``("aoc_cache")``

    The directory is not created here for the first three sources;
    :class:`~aoc_cache.cache.index.CacheIndex` creates it lazily.
    """
    if cli_cache_dir:
        return Path(cli_cache_dir).expanduser()
    env_value = os.environ.get(CACHE_DIR_ENV, "")
    if env_value:
        return Path(env_value).expanduser()
    if config is not None and config.cache_dir:
        return Path(config.cache_dir).expanduser()
    return directory_for(CACHE_NAMESPACE)


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file lives in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX. On failure the temp file is
    removed and the original exception propagates.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration, or defaults when no file exists.

    Raises:
        ConfigError: If the file exists but holds invalid JSON or fails
            validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Cookie resolution ---


def resolve_cookie(source: str) -> str:
    """Resolve a session cookie from a source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads from an environment variable
        - ``"file:/path/to/my.cookie"`` -- reads a file, stripping whitespace
        - ``"prompt"`` -- asks interactively (stdin must be a TTY)
        - ``"literal:session=abcd"`` -- the value after the prefix, as-is

    The value is returned unchanged apart from file stripping; an empty
    cookie is not an error here because a cache hit never needs one.

    Raises:
        ConfigError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigError(f"Cookie file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read cookie file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError(
                "Cannot prompt for the cookie: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("Session cookie: ")

    if source.startswith("literal:"):
        return source[8:]

    raise ConfigError(f"Unknown cookie source format: {source}")

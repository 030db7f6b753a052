"""``aoc-cache config`` -- inspect and edit ``config.json``.

Keys use dot notation matching :class:`~aoc_cache.models.GlobalConfig`
(``cache_dir``, ``cookie_source``, ``request.timeout``, ...). Values are
passed to pydantic as strings, so ``"7"`` becomes an int and ``"false"`` a
bool wherever the field asks for one.
"""

from __future__ import annotations

from typing import Any

import typer
from pydantic import ValidationError

from aoc_cache.output import info, print_record, success

config_app = typer.Typer(no_args_is_help=True)


def _assign(data: dict[str, Any], key: str, value: str) -> None:
    """Set the leaf *key* of the dumped config *data* to *value* in place."""
    *parents, leaf = key.split(".")
    node: Any = data
    for part in parents:
        node = node.get(part)
        if not isinstance(node, dict):
            raise typer.BadParameter(f"{part!r} is not a config section", param_hint="KEY")
    if leaf not in node or isinstance(node[leaf], dict):
        raise typer.BadParameter(f"Unknown config key: {key}", param_hint="KEY")
    node[leaf] = value


@config_app.command("show")
def config_show() -> None:
    """Print the effective configuration (defaults filled in)."""
    from aoc_cache.config import get_config_dir, load_global_config

    info(f"Config directory: {get_config_dir()}")
    print_record(load_global_config().model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Dotted key, e.g. 'cookie_source' or 'request.timeout'."),
    value: str = typer.Argument(help="New value."),
) -> None:
    """Change one setting and save the file.

    Example::

        aoc-cache config set cookie_source file:~/.config/aoc/session.cookie
        aoc-cache config set request.timeout 10
    """
    from aoc_cache.config import load_global_config, save_global_config
    from aoc_cache.models import GlobalConfig

    data = load_global_config().model_dump(mode="json")
    _assign(data, key, value)
    try:
        updated = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        reason = exc.errors()[0]["msg"]
        raise typer.BadParameter(f"{value!r} for {key}: {reason}", param_hint="VALUE") from None

    save_global_config(updated)
    success(f"{key} = {value}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Do not ask first."),
) -> None:
    """Write a default ``config.json``. Cached inputs are left alone."""
    from aoc_cache.config import save_global_config
    from aoc_cache.models import GlobalConfig

    if not force:
        typer.confirm("Replace config.json with defaults?", abort=True)
    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")

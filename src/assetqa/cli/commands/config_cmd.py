"""assetqa config — inspect and edit assetqa.config.yaml."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer
import yaml
from pydantic import BaseModel

from assetqa.core.config import (
    DEFAULT_CONFIG_FILENAME,
    find_config_file,
    load_config,
    masked_dump,
    save_config,
)
from assetqa.core.exceptions import ConfigError
from assetqa.core.models import Config

config_app = typer.Typer(
    name="config",
    help="Configuration management commands.",
    no_args_is_help=True,
)


@config_app.command(name="show")
def config_show(
    section: str | None = typer.Option(
        None, "--section", "-s", help="Only this top-level section (e.g. appium)."
    ),
    config_path: str | None = typer.Option(None, "--config", "-c", help="Config file path."),
) -> None:
    """Show the effective configuration (secrets masked)."""
    try:
        config = load_config(config_path=Path(config_path) if config_path else None)
        data = masked_dump(config)
        if section is not None:
            if section not in data:
                msg = f"Unknown config section: {section!r} (available: {', '.join(data)})"
                raise ConfigError(msg)
            data = {section: data[section]}
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from None
    typer.echo(yaml.safe_dump(data, default_flow_style=False, allow_unicode=True, sort_keys=False))


@config_app.command(name="set")
def config_set(
    key: str = typer.Argument(help="Dotted config key (e.g. appium.udid)."),
    value: str = typer.Argument(help="Value to set."),
    config_path: str | None = typer.Option(None, "--config", "-c", help="Config file path."),
) -> None:
    """Set a configuration value by dotted key and save the file.

    Environment variables are not written back; only the file and the new
    value are merged.
    """
    try:
        path = Path(config_path) if config_path else _config_path()
        parts = _split_key(key)
        config = load_config(config_path=path, overrides=_nest(parts, value), include_env=False)
        save_config(config, path)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from None
    shown = "********" if parts[-1] == "password" else value
    typer.echo(f"Set {key} = {shown} ({path})")


@config_app.command(name="path")
def config_path_command() -> None:
    """Print which config file would be loaded."""
    found = find_config_file()
    if found is None:
        typer.echo("No config file found (defaults + ASSETQA_ environment)")
        return
    typer.echo(str(found))


def _config_path() -> Path:
    """Existing config file, else assetqa.config.yaml in cwd."""
    return find_config_file() or Path.cwd() / DEFAULT_CONFIG_FILENAME


def _split_key(key: str) -> list[str]:
    """Check key names a real setting, walking the config models.

    Raises:
        ConfigError: For an empty segment or a name the model lacks.
    """
    parts = key.split(".")
    if not all(parts):
        msg = f"Invalid config key: {key!r}"
        raise ConfigError(msg)
    model: type[BaseModel] | None = Config
    for depth, part in enumerate(parts):
        if model is None or part not in model.model_fields:
            msg = f"Unknown config key: {'.'.join(parts[: depth + 1])!r}"
            raise ConfigError(msg)
        annotation = model.model_fields[part].annotation
        is_model = isinstance(annotation, type) and issubclass(annotation, BaseModel)
        model = annotation if is_model else None
    if model is not None:
        msg = f"{key!r} is a section; set one of its keys (e.g. {key}.{next(iter(model.model_fields))})"
        raise ConfigError(msg)
    return parts


def _nest(parts: list[str], value: Any) -> dict[str, Any]:
    """['appium', 'udid'] -> {'appium': {'udid': value}}."""
    result: dict[str, Any] = {parts[-1]: value}
    for part in reversed(parts[:-1]):
        result = {part: result}
    return result

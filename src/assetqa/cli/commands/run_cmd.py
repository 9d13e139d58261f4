"""assetqa run — run the device scenario suite through pytest."""

from __future__ import annotations

from pathlib import Path

import pytest
import typer

from assetqa.core.config import load_config
from assetqa.core.exceptions import ConfigError

DEFAULT_SUITE = Path("tests") / "e2e"


def run_command(
    suite_path: str = typer.Argument(str(DEFAULT_SUITE), help="Test file or directory."),
    keyword: str | None = typer.Option(None, "--keyword", "-k", help="pytest -k expression."),
    config_path: str | None = typer.Option(None, "--config", "-c", help="Config file path."),
    no_reset: bool | None = typer.Option(
        None, "--no-reset/--reset", help="Override appium.no_reset for this run."
    ),
) -> None:
    """Run the Assets scenarios against the configured device."""
    cfg_path = Path(config_path) if config_path else None
    try:
        # Fail fast on a broken config instead of inside pytest collection.
        load_config(config_path=cfg_path)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from None

    path = Path(suite_path)
    if not path.exists():
        typer.echo(f"Error: test path not found: {path}", err=True)
        raise typer.Exit(code=1)

    args = [str(path), "--device"]
    if keyword:
        args += ["-k", keyword]
    if cfg_path is not None:
        args += ["--assetqa-config", str(cfg_path)]
    if no_reset is not None:
        args.append("--no-reset" if no_reset else "--reset")

    typer.echo(f"pytest {' '.join(args)}")
    exit_code = pytest.main(args)
    raise typer.Exit(code=int(exit_code))

"""assetqa init — project initialization."""

from __future__ import annotations

from pathlib import Path

import typer

from assetqa.core.config import CONFIG_DIRNAME, DEFAULT_CONFIG_FILENAME, save_config
from assetqa.core.models import AppiumConfig, Config

_GITIGNORE_ENTRIES = f"""\

# assetqa data
{DEFAULT_CONFIG_FILENAME}
{CONFIG_DIRNAME}/
screenshots/
reports/
"""


def init_command(
    name: str = typer.Option("assetqa", "--name", "-n", help="Project name."),
    bundle_id: str = typer.Option("", "--bundle-id", "-b", help="Bundle id of the app under test."),
    app_path: str = typer.Option("", "--app", "-a", help="Path to the .app/.ipa to install."),
    device: str = typer.Option("iPhone Simulator", "--device", "-d", help="Device name."),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing config."),
) -> None:
    """Initialize an assetqa project in the current directory."""
    root = Path.cwd()
    config_path = root / DEFAULT_CONFIG_FILENAME
    if config_path.exists() and not force:
        typer.echo(f"Error: {config_path} already exists (use --force)", err=True)
        raise typer.Exit(code=1)

    (root / CONFIG_DIRNAME).mkdir(parents=True, exist_ok=True)

    config = Config(
        project_name=name,
        appium=AppiumConfig(bundle_id=bundle_id, app_path=app_path, device_name=device),
    )
    save_config(config, config_path)

    # Credentials go in the config file or env vars; keep both out of git.
    gitignore_path = root / ".gitignore"
    if gitignore_path.exists():
        existing = gitignore_path.read_text(encoding="utf-8")
        if DEFAULT_CONFIG_FILENAME not in existing:
            with open(gitignore_path, "a", encoding="utf-8") as f:  # noqa: PTH123
                f.write(_GITIGNORE_ENTRIES)

    typer.echo(f"assetqa project '{name}' initialized.")
    typer.echo(f"  Config: {config_path}")
    typer.echo("  Set credentials with ASSETQA_CREDENTIALS__EMAIL / __PASSWORD / __COMPANY_CODE")

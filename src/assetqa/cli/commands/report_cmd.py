"""assetqa report — show the summary of a previous run."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from assetqa.core.config import load_config
from assetqa.core.exceptions import ConfigError

_COLORS = {
    "passed": typer.colors.GREEN,
    "failed": typer.colors.RED,
    "skipped": typer.colors.YELLOW,
}


def report_command(
    report_dir: str | None = typer.Argument(
        None, help="Report directory (default: reports.reports_dir)."
    ),
    config_path: str | None = typer.Option(None, "--config", "-c", help="Config file path."),
) -> None:
    """Print summary.json of a previous run."""
    if report_dir is None:
        try:
            config = load_config(config_path=Path(config_path) if config_path else None)
        except ConfigError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1) from None
        report_dir = config.reports.reports_dir

    summary_path = Path(report_dir) / "summary.json"
    if not summary_path.exists():
        typer.echo(f"Error: no summary found at {summary_path}", err=True)
        raise typer.Exit(code=1)
    try:
        summary = json.loads(summary_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        typer.echo(f"Error: cannot read {summary_path}: {e}", err=True)
        raise typer.Exit(code=1) from None

    for test in summary.get("tests", []):
        status = str(test.get("status", ""))
        label = typer.style(status.upper().ljust(7), fg=_COLORS.get(status))
        name = f"{test.get('module', '')} / {test.get('name', '')}"
        typer.echo(f"{label} {name} ({test.get('duration_ms', 0):.0f}ms)")
        if test.get("failure_reason"):
            typer.echo(f"        {test['failure_reason']}")

    typer.echo(
        f"\nSummary: {summary.get('passed', 0)} passed, {summary.get('failed', 0)} failed, "
        f"{summary.get('skipped', 0)} skipped, {summary.get('total', 0)} total"
    )
    typer.echo(f"Report: {summary_path.with_name('report.md')}")
    if summary.get("failed", 0):
        raise typer.Exit(code=1)

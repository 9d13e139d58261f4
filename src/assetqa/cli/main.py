"""assetqa CLI entry point."""

import logging

import typer

app = typer.Typer(
    name="assetqa",
    help="assetqa — UI test suite for the mobile Assets module",
    no_args_is_help=True,
)

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def version_callback(value: bool) -> None:
    if value:
        from assetqa import __version__

        typer.echo(f"assetqa {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    ),
) -> None:
    """assetqa — UI test suite for the mobile Assets module."""
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        typer.echo(f"Error: unknown log level {log_level!r}", err=True)
        raise typer.Exit(code=2)
    logging.basicConfig(level=level, format=LOG_FORMAT)


# -- Register commands --------------------------------------------------------

from assetqa.cli.commands.config_cmd import config_app  # noqa: E402
from assetqa.cli.commands.init_cmd import init_command  # noqa: E402
from assetqa.cli.commands.inspect_cmd import inspect_command  # noqa: E402
from assetqa.cli.commands.report_cmd import report_command  # noqa: E402
from assetqa.cli.commands.run_cmd import run_command  # noqa: E402

app.command(name="init")(init_command)
app.add_typer(config_app, name="config")
app.command(name="run")(run_command)
app.command(name="inspect")(inspect_command)
app.command(name="report")(report_command)

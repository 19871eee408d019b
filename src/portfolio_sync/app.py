"""Root Typer app with global options and command groups."""

from __future__ import annotations

from typing import Optional

import typer

from portfolio_sync import __version__
from portfolio_sync.commands import config_cmd, project, serve, sync_cmd
from portfolio_sync.logging_config import setup_logging

app = typer.Typer(
    name="portfolio-sync",
    help="Portfolio project records with uploads mirrored to GitHub.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    if value:
        print(f"portfolio-sync {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Optional[bool] = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True, help="Show version and exit."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to stderr."),
) -> None:
    """Store portfolio projects locally and mirror their files to a GitHub repository."""
    setup_logging("INFO" if verbose else "WARNING")


# Register command groups
app.add_typer(sync_cmd.app, name="sync")
app.add_typer(project.app, name="project")
app.add_typer(config_cmd.app, name="config")
app.command("serve")(serve.serve)


def main() -> None:
    app()

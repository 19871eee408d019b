"""Config commands for inspecting and changing settings."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from portfolio_sync.client.errors import error_handler
from portfolio_sync.commands import _common
from portfolio_sync.commands._common import FormatOpt
from portfolio_sync.output.formatter import output

app = typer.Typer(name="config", help="Inspect and change configuration.")
console = Console()


def _mask(token: str | None) -> str:
    if not token:
        return "(not set)"
    return token[:4] + "..." if len(token) > 8 else "***"


@app.command()
@error_handler
def show(fmt: FormatOpt = "table") -> None:
    """Show the effective configuration (token masked)."""
    mgr = _common.get_manager()
    remote = mgr.resolve_remote()
    server = mgr.resolve_server()
    data = {
        "api_url": remote.api_url,
        "repository": remote.repository,
        "branch": remote.branch,
        "timeout": remote.timeout,
        "token": _mask(remote.token),
        "token_file": str(mgr.config.token_file) if mgr.config.token_file else None,
        "data_dir": str(server.data_dir),
        "host": server.host,
        "port": server.port,
        "remote_prefix": server.remote_prefix,
        "static_dir": str(server.static_dir) if server.static_dir else None,
    }
    output(data, fmt, title="Configuration")


@app.command("set")
@error_handler
def set_value(
    key: Annotated[str, typer.Argument(help="Dotted key, e.g. remote.branch")],
    value: Annotated[str, typer.Argument(help="New value")],
) -> None:
    """Set a configuration value."""
    mgr = _common.get_manager()
    mgr.set_value(key, value)
    console.print(f"[green]{key} set.[/]")


@app.command()
def path() -> None:
    """Print the config file location."""
    print(_common.get_manager().config_path)

"""Serve command that runs the HTTP API."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from portfolio_sync.client.errors import error_handler
from portfolio_sync.commands import _common
from portfolio_sync.commands._common import (
    BranchOpt,
    DataDirOpt,
    OwnerOpt,
    RepoOpt,
    TokenOpt,
)
from portfolio_sync.logging_config import setup_logging


@error_handler
def serve(
    host: Annotated[str | None, typer.Option("--host", help="Bind address")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Bind port")] = None,
    data_dir: DataDirOpt = None,
    static_dir: Annotated[
        Path | None,
        typer.Option("--static-dir", help="Serve this folder at / (index.html included)"),
    ] = None,
    no_mirror: Annotated[
        bool,
        typer.Option("--no-mirror", help="Keep uploads local; do not mirror them"),
    ] = False,
    owner: OwnerOpt = None,
    repo: RepoOpt = None,
    branch: BranchOpt = None,
    token: TokenOpt = None,
    log_level: Annotated[str, typer.Option("--log-level", help="Logging level")] = "INFO",
) -> None:
    """Run the projects API and mirror uploads to the remote repository."""
    import uvicorn

    from portfolio_sync.server.app import create_app

    mgr = _common.get_manager()
    server = mgr.resolve_server(data_dir=data_dir, host=host, port=port, static_dir=static_dir)
    remote = None if no_mirror else mgr.resolve_remote(
        owner=owner, repo=repo, branch=branch, token=token,
    )
    setup_logging(log_level.upper())
    app = create_app(server, remote)
    uvicorn.run(app, host=server.host, port=server.port, log_config=None)

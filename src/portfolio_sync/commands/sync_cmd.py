"""Sync commands that mirror a file or a folder to the remote repository."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from portfolio_sync.client.errors import error_handler
from portfolio_sync.commands._common import (
    BranchOpt,
    FormatOpt,
    OwnerOpt,
    RepoOpt,
    TokenOpt,
    open_mirror,
    resolve_remote,
)
from portfolio_sync.config.models import RemoteSettings
from portfolio_sync.models.sync import SyncResult, TreeSyncReport
from portfolio_sync.output.formatter import SYNC_COLUMNS, output, sync_rows

app = typer.Typer(name="sync", help="Mirror local files to the remote repository.")
console = Console()


async def _sync_file(
    settings: RemoteSettings, local: Path, remote_path: str, message: str,
) -> SyncResult:
    async with open_mirror(settings) as mirror:
        return await mirror.sync(local, remote_path, message)


async def _sync_tree(settings: RemoteSettings, local_dir: Path, remote_dir: str) -> TreeSyncReport:
    async with open_mirror(settings) as mirror:
        return await mirror.sync_tree(local_dir, remote_dir)


@app.command("file")
@error_handler
def sync_file(
    local: Annotated[Path, typer.Argument(help="Local file to upload")],
    remote_path: Annotated[str, typer.Argument(help="Destination path in the repository")],
    message: Annotated[
        str | None,
        typer.Option("--message", "-m", help="Commit message"),
    ] = None,
    owner: OwnerOpt = None,
    repo: RepoOpt = None,
    branch: BranchOpt = None,
    token: TokenOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Create or update one file in the remote repository."""
    settings = resolve_remote(owner, repo, branch, token)
    result = asyncio.run(
        _sync_file(settings, local, remote_path, message or f"Upload {local.name}")
    )
    if fmt != "table":
        output(result, fmt, columns=SYNC_COLUMNS, rows=sync_rows([result]))
    elif result.ok:
        action = "created" if result.created else "updated"
        console.print(f"[green]{result.remote_path} {action} on {settings.repository}.[/]")
    if not result.ok:
        if fmt == "table":
            kind = result.kind.value if result.kind else "failed"
            console.print(f"[red]Sync failed ({kind}):[/] {escape(result.detail or '')}")
        raise typer.Exit(1)


@app.command("tree")
@error_handler
def sync_tree(
    local_dir: Annotated[Path, typer.Argument(help="Local folder to upload")],
    remote_dir: Annotated[str, typer.Argument(help="Destination folder in the repository")],
    owner: OwnerOpt = None,
    repo: RepoOpt = None,
    branch: BranchOpt = None,
    token: TokenOpt = None,
    fmt: FormatOpt = "table",
) -> None:
    """Upload every file under a folder, keeping relative paths."""
    settings = resolve_remote(owner, repo, branch, token)
    report = asyncio.run(_sync_tree(settings, local_dir, remote_dir))
    if report.error is not None:
        console.print(f"[red]{escape(report.error.detail or '')}[/]")
        raise typer.Exit(1)
    output(
        report,
        fmt,
        columns=SYNC_COLUMNS,
        rows=sync_rows(report.results),
        title=f"Sync: {local_dir} -> {report.remote_dir}",
    )
    if fmt == "table":
        console.print(
            f"{len(report.succeeded)} synced, {len(report.failed)} failed."
        )
    if not report.ok:
        raise typer.Exit(1)

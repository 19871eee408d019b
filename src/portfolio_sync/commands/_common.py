"""Shared helpers for CLI commands: config access, shared options and the mirror factory."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Annotated

import typer

from portfolio_sync.client.github import ContentsClient
from portfolio_sync.config.manager import ConfigManager
from portfolio_sync.config.models import RemoteSettings, ServerSettings
from portfolio_sync.store.records import RecordStore
from portfolio_sync.sync.mirror import FileMirror

# Shared Typer option type aliases
OwnerOpt = Annotated[
    str | None,
    typer.Option("--owner", help="Repository owner override"),
]
RepoOpt = Annotated[
    str | None,
    typer.Option("--repo", help="Repository name override"),
]
BranchOpt = Annotated[
    str | None,
    typer.Option("--branch", "-b", help="Branch override"),
]
TokenOpt = Annotated[
    str | None,
    typer.Option("--token", help="API token override"),
]
DataDirOpt = Annotated[
    Path | None,
    typer.Option("--data-dir", "-d", help="Directory holding proyectos.json and uploads/"),
]
FormatOpt = Annotated[
    str,
    typer.Option("--format", "-f", help="Output format: table, json, yaml, csv"),
]


def get_manager() -> ConfigManager:
    return ConfigManager()


def resolve_remote(
    owner: str | None,
    repo: str | None,
    branch: str | None,
    token: str | None,
) -> RemoteSettings:
    """Resolve remote settings from CLI options, env vars, or config file."""
    return get_manager().resolve_remote(
        owner=owner, repo=repo, branch=branch, token=token, require_token=True,
    )


def resolve_server(data_dir: Path | None) -> ServerSettings:
    return get_manager().resolve_server(data_dir=data_dir)


def make_store(data_dir: Path | None) -> RecordStore:
    return RecordStore(resolve_server(data_dir).records_file)


@asynccontextmanager
async def open_mirror(settings: RemoteSettings) -> AsyncIterator[FileMirror]:
    """Yield a FileMirror whose HTTP client is closed on exit."""
    async with ContentsClient(settings) as client:
        yield FileMirror(client)

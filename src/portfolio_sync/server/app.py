"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from portfolio_sync import __version__
from portfolio_sync.client.github import ContentsClient
from portfolio_sync.config.models import RemoteSettings, ServerSettings
from portfolio_sync.server.routes import router
from portfolio_sync.server.uploads import UploadIntake
from portfolio_sync.store.records import RecordStore
from portfolio_sync.sync.mirror import FileMirror

logger = logging.getLogger(__name__)


def create_app(
    server: ServerSettings,
    remote: RemoteSettings | None = None,
    *,
    mirror: FileMirror | None = None,
) -> FastAPI:
    """Build the app.

    Uploads are mirrored through ``mirror`` if given, otherwise through a
    client built from ``remote`` for the app's lifetime. With neither, files
    are kept locally only.
    """
    store = RecordStore(server.records_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if mirror is not None or remote is None:
            app.state.intake = UploadIntake(store, server, mirror)
            yield
            return
        if not remote.auth_configured:
            logger.warning("No API token configured; mirroring to %s will fail", remote.repository)
        async with ContentsClient(remote) as client:
            app.state.intake = UploadIntake(store, server, FileMirror(client))
            logger.info("Mirroring uploads to %s@%s", remote.repository, remote.branch)
            yield

    app = FastAPI(title="portfolio-sync", version=__version__, lifespan=lifespan)
    app.state.store = store
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)

    server.uploads_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=server.uploads_dir), name="uploads")
    if server.static_dir is not None:
        # Last, so the API routes above take precedence over files
        app.mount("/", StaticFiles(directory=server.static_dir, html=True), name="static")
    return app

"""Upload intake: save an uploaded file, record it and mirror it."""

from __future__ import annotations

import logging
import shutil
import time
from pathlib import Path
from typing import BinaryIO

from fastapi.concurrency import run_in_threadpool

from portfolio_sync.config.models import ServerSettings
from portfolio_sync.models.project import ProjectRecord
from portfolio_sync.models.sync import SyncResult
from portfolio_sync.store.records import RecordStore
from portfolio_sync.sync.mirror import FileMirror

logger = logging.getLogger(__name__)


def safe_filename(name: str) -> str:
    """Strip any directory part a client put in the file name."""
    base = Path(name.replace("\\", "/")).name.strip()
    if base in ("", ".", ".."):
        raise ValueError(f"Invalid file name: {name!r}")
    return base


class UploadIntake:
    """Stores uploads under ``uploads/`` and mirrors them as a side effect.

    Mirroring is best-effort: its outcome is logged and returned, and never
    undoes or fails the local save.
    """

    def __init__(
        self,
        store: RecordStore,
        settings: ServerSettings,
        mirror: FileMirror | None = None,
    ) -> None:
        self.store = store
        self.settings = settings
        self.mirror = mirror

    def save(self, original_name: str, stream: BinaryIO) -> Path:
        """Write ``stream`` to ``<millis>-<name>``, bumping millis until the name is free."""
        name = safe_filename(original_name)
        uploads = self.settings.uploads_dir
        uploads.mkdir(parents=True, exist_ok=True)
        stamp = time.time_ns() // 1_000_000
        while True:
            dest = uploads / f"{stamp}-{name}"
            try:
                with open(dest, "xb") as fh:
                    shutil.copyfileobj(stream, fh)
            except FileExistsError:
                stamp += 1
                continue
            return dest

    def remote_path(self, stored_name: str) -> str:
        prefix = self.settings.remote_prefix
        return f"{prefix}/{stored_name}" if prefix else stored_name

    async def accept(
        self,
        *,
        title: str | None,
        description: str | None,
        filename: str,
        stream: BinaryIO,
    ) -> tuple[ProjectRecord, SyncResult | None]:
        """Save, record and mirror one upload.

        Disk writes and the store lock run on worker threads.
        """
        dest = await run_in_threadpool(self.save, filename, stream)
        record = await run_in_threadpool(
            self.store.add,
            title=title,
            description=description,
            file_name=dest.name,
            file_url=f"/uploads/{dest.name}",
        )
        if self.mirror is None:
            logger.info("Mirroring disabled; %s kept locally only", dest.name)
            return record, None
        result = await self.mirror.sync(dest, self.remote_path(dest.name), f"Upload {dest.name}")
        if not result.ok:
            logger.warning("Project %s saved but not mirrored: %s", record.id, result.detail)
        return record, result

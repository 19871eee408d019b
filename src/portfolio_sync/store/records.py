"""Flat-file JSON store of project records."""

from __future__ import annotations

import json
import logging
import os
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import Any

from portfolio_sync.client.errors import PortfolioSyncError, RecordNotFoundError
from portfolio_sync.models.project import ProjectRecord, ProjectUpdate

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# One lock per store file, shared by every RecordStore in the process.
_locks: dict[Path, threading.Lock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = path.resolve()
    with _locks_guard:
        return _locks.setdefault(key, threading.Lock())


class RecordStore:
    """Read-all / write-all store for a single JSON array of records.

    Every read-modify-write holds the file's lock and replaces the file
    atomically, so concurrent requests in one process cannot lose updates.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._lock = _lock_for(path)

    def _read(self) -> list[ProjectRecord]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise PortfolioSyncError(f"Corrupt record store {self.path}: {exc}") from exc
        if not isinstance(raw, list):
            raise PortfolioSyncError(f"Record store {self.path} is not a JSON array")
        return [ProjectRecord.model_validate(item) for item in raw]

    def _write(self, records: list[ProjectRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = [r.to_json() for r in records]
        # Atomic write: write to temp file, then rename
        temp = self.path.with_suffix(self.path.suffix + ".tmp")
        temp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        os.replace(temp, self.path)

    def read_all(self) -> list[ProjectRecord]:
        with self._lock:
            return self._read()

    def write_all(self, records: list[ProjectRecord]) -> None:
        with self._lock:
            self._write(records)

    def get(self, record_id: int) -> ProjectRecord:
        for record in self.read_all():
            if record.id == record_id:
                return record
        raise RecordNotFoundError(record_id)

    def add(
        self,
        *,
        title: str | None,
        description: str | None,
        file_name: str,
        file_url: str,
    ) -> ProjectRecord:
        """Create a record and prepend it so the newest project lists first."""
        with self._lock:
            records = self._read()
            record = ProjectRecord(
                id=self._next_id(records),
                title=title,
                description=description,
                file_name=file_name,
                file_url=file_url,
                created_at=datetime.now().strftime(TIMESTAMP_FORMAT),
            )
            records.insert(0, record)
            self._write(records)
        logger.info("Created project %s (%s)", record.id, file_name)
        return record

    def update(self, record_id: int, changes: ProjectUpdate | dict[str, Any]) -> bool:
        """Merge ``changes`` into the record. Returns False if no record matched."""
        if isinstance(changes, dict):
            changes = ProjectUpdate.model_validate(changes)
        patch = changes.changes()
        found = False
        with self._lock:
            records = self._read()
            merged = []
            for record in records:
                if record.id == record_id:
                    found = True
                    record = ProjectRecord.model_validate({**record.to_json(), **patch})
                merged.append(record)
            self._write(merged)
        if not found:
            logger.warning("Update for unknown project %s ignored", record_id)
        return found

    def delete(self, record_id: int) -> bool:
        """Remove the record. Returns False if no record matched."""
        with self._lock:
            records = self._read()
            kept = [r for r in records if r.id != record_id]
            self._write(kept)
        removed = len(kept) != len(records)
        if not removed:
            logger.warning("Delete for unknown project %s ignored", record_id)
        return removed

    @staticmethod
    def _next_id(records: list[ProjectRecord]) -> int:
        """Millisecond timestamp, bumped past any existing id."""
        candidate = time.time_ns() // 1_000_000
        highest = max((r.id for r in records), default=0)
        return max(candidate, highest + 1)

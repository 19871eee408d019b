"""Outcomes of mirroring files to the remote host."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class SyncFailureKind(str, Enum):
    """Why a sync did not complete."""

    LOCAL_NOT_FOUND = "local_not_found"
    REMOTE_QUERY_FAILED = "remote_query_failed"
    REMOTE_WRITE_FAILED = "remote_write_failed"
    REMOTE_TIMEOUT = "remote_timeout"
    PARTIAL_TREE_FAILURE = "partial_tree_failure"


class SyncResult(BaseModel):
    """Result of one create-or-update against the remote host."""

    local_path: Path
    remote_path: str
    ok: bool
    kind: SyncFailureKind | None = None
    status_code: int | None = None
    detail: str | None = None
    sha: str | None = Field(default=None, description="Revision marker after the write")
    created: bool | None = None

    @classmethod
    def success(
        cls, local_path: Path, remote_path: str, *, sha: str | None, created: bool,
    ) -> SyncResult:
        return cls(
            local_path=local_path, remote_path=remote_path, ok=True,
            sha=sha, created=created,
        )

    @classmethod
    def failure(
        cls,
        local_path: Path,
        remote_path: str,
        kind: SyncFailureKind,
        detail: str,
        *,
        status_code: int | None = None,
    ) -> SyncResult:
        return cls(
            local_path=local_path, remote_path=remote_path, ok=False,
            kind=kind, detail=detail, status_code=status_code,
        )


class TreeSyncReport(BaseModel):
    """Per-file results of a recursive folder sync."""

    local_dir: Path
    remote_dir: str
    results: list[SyncResult] = Field(default_factory=list)
    error: SyncResult | None = None

    @property
    def succeeded(self) -> list[SyncResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> list[SyncResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return self.error is None and not self.failed

    @property
    def kind(self) -> SyncFailureKind | None:
        if self.error is not None:
            return self.error.kind
        if self.failed:
            return SyncFailureKind.PARTIAL_TREE_FAILURE
        return None

"""Mirror local files and folders to the remote repository."""

from __future__ import annotations

import base64
import logging
from pathlib import Path

import anyio.to_thread

from portfolio_sync.client.errors import PortfolioSyncError, RemoteTimeoutError
from portfolio_sync.client.github import ContentsClient
from portfolio_sync.models.sync import SyncFailureKind, SyncResult, TreeSyncReport

logger = logging.getLogger(__name__)


def tree_commit_message(name: str, remote_dir: str) -> str:
    return f"Add {name} to project {remote_dir}"


def _encode_file(path: Path) -> str:
    return base64.b64encode(path.read_bytes()).decode("ascii")


class FileMirror:
    """Create-or-update files on the remote host.

    Failures never raise: every call returns a result that says what went
    wrong, and the failure is logged.
    """

    def __init__(self, client: ContentsClient) -> None:
        self.client = client

    async def sync(self, local_path: Path, remote_path: str, message: str) -> SyncResult:
        """Upload ``local_path`` to ``remote_path``, overwriting any existing copy.

        One existence check, then one conditional write. The write carries the
        revision marker only if the check found one; a stale marker fails the
        write and is reported, not retried.
        """
        local_path = Path(local_path)
        remote_path = remote_path.strip("/")
        if not local_path.is_file():
            return self._failed(
                local_path, remote_path, SyncFailureKind.LOCAL_NOT_FOUND,
                f"Local file not found: {local_path}",
            )
        try:
            content = await anyio.to_thread.run_sync(_encode_file, local_path)
        except OSError as exc:
            return self._failed(
                local_path, remote_path, SyncFailureKind.LOCAL_NOT_FOUND,
                f"Cannot read {local_path}: {exc}",
            )

        try:
            sha = await self.client.get_content_sha(remote_path)
        except PortfolioSyncError as exc:
            return self._failed_from(local_path, remote_path, SyncFailureKind.REMOTE_QUERY_FAILED, exc)

        try:
            data = await self.client.put_content(remote_path, content, message, sha=sha)
        except PortfolioSyncError as exc:
            return self._failed_from(local_path, remote_path, SyncFailureKind.REMOTE_WRITE_FAILED, exc)

        written = data.get("content")
        new_sha = written.get("sha") if isinstance(written, dict) else None
        logger.info(
            "%s %s on %s",
            "Updated" if sha else "Created",
            remote_path,
            self.client.settings.repository,
        )
        return SyncResult.success(local_path, remote_path, sha=new_sha, created=sha is None)

    async def sync_tree(self, local_dir: Path, remote_dir: str) -> TreeSyncReport:
        """Mirror every file under ``local_dir`` to ``remote_dir``, one at a time.

        A failed file is recorded and the walk carries on with its siblings.
        """
        local_dir = Path(local_dir)
        remote_dir = remote_dir.strip("/")
        report = TreeSyncReport(local_dir=local_dir, remote_dir=remote_dir)
        if not local_dir.is_dir():
            report.error = self._failed(
                local_dir, remote_dir, SyncFailureKind.LOCAL_NOT_FOUND,
                f"Local folder not found: {local_dir}",
            )
            return report
        await self._walk(local_dir, remote_dir, report)
        if report.failed:
            logger.error(
                "Synced %d of %d files from %s; %d failed",
                len(report.succeeded), len(report.results), local_dir, len(report.failed),
            )
        else:
            logger.info("Synced %d files from %s to %s", len(report.results), local_dir, remote_dir)
        return report

    async def _walk(self, local_dir: Path, remote_dir: str, report: TreeSyncReport) -> None:
        try:
            children = sorted(local_dir.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            report.results.append(self._failed(
                local_dir, remote_dir, SyncFailureKind.LOCAL_NOT_FOUND,
                f"Cannot list {local_dir}: {exc}",
            ))
            return
        for child in children:
            remote_child = f"{remote_dir}/{child.name}" if remote_dir else child.name
            if child.is_dir():
                await self._walk(child, remote_child, report)
            else:
                result = await self.sync(
                    child, remote_child, tree_commit_message(child.name, remote_dir),
                )
                report.results.append(result)

    def _failed_from(
        self,
        local_path: Path,
        remote_path: str,
        kind: SyncFailureKind,
        exc: PortfolioSyncError,
    ) -> SyncResult:
        if isinstance(exc, RemoteTimeoutError):
            kind = SyncFailureKind.REMOTE_TIMEOUT
        return self._failed(local_path, remote_path, kind, str(exc), status_code=exc.status_code)

    def _failed(
        self,
        local_path: Path,
        remote_path: str,
        kind: SyncFailureKind,
        detail: str,
        *,
        status_code: int | None = None,
    ) -> SyncResult:
        logger.error("Sync of %s to %s failed (%s): %s", local_path, remote_path, kind.value, detail)
        return SyncResult.failure(local_path, remote_path, kind, detail, status_code=status_code)

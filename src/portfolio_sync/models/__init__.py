"""Pydantic data models for records and sync outcomes."""

from portfolio_sync.models.project import ProjectRecord, ProjectUpdate
from portfolio_sync.models.sync import SyncFailureKind, SyncResult, TreeSyncReport

__all__ = [
    "ProjectRecord",
    "ProjectUpdate",
    "SyncFailureKind",
    "SyncResult",
    "TreeSyncReport",
]

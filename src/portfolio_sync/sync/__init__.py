"""Remote mirroring of local files and folders."""

from portfolio_sync.sync.mirror import FileMirror

__all__ = ["FileMirror"]

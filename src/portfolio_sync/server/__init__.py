"""HTTP server: routes, upload intake and static files."""

from portfolio_sync.server.app import create_app

__all__ = ["create_app"]

"""Authentication for the remote contents API."""

from __future__ import annotations

from collections.abc import Generator

import httpx

from portfolio_sync.config.models import RemoteSettings


class BearerTokenAuth(httpx.Auth):
    """Authenticate with a static bearer token (Authorization header)."""

    def __init__(self, token: str) -> None:
        self.token = token

    def auth_flow(
        self, request: httpx.Request,
    ) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self.token}"
        yield request


def resolve_auth(settings: RemoteSettings) -> httpx.Auth | None:
    """Resolve authentication from the remote settings."""
    if settings.token:
        return BearerTokenAuth(settings.token)
    return None

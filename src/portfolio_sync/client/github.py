"""GitHub contents API client."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import quote

import httpx

from portfolio_sync.client.auth import resolve_auth
from portfolio_sync.client.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PortfolioSyncError,
    RemoteAPIError,
    RemoteConnectionError,
    RemoteTimeoutError,
    ValidationError,
)
from portfolio_sync.config.constants import GITHUB_MEDIA_TYPE
from portfolio_sync.config.models import RemoteSettings


def _error_detail(response: httpx.Response) -> str:
    """Remote error message, followed by any field errors and docs link in the body."""
    try:
        payload = response.json()
    except json.JSONDecodeError:
        return response.text
    if not isinstance(payload, dict):
        return response.text
    parts = [str(payload.get("message", response.text))]
    if payload.get("errors"):
        parts.append(f"errors: {json.dumps(payload['errors'], ensure_ascii=False)}")
    if payload.get("documentation_url"):
        parts.append(f"see {payload['documentation_url']}")
    return "; ".join(parts)


class ContentsClient:
    """Asynchronous HTTP client for the repository contents endpoints."""

    def __init__(
        self,
        settings: RemoteSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.base_url = settings.api_url
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            auth=resolve_auth(settings),
            timeout=settings.timeout,
            transport=transport,
            headers={"Accept": GITHUB_MEDIA_TYPE},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> ContentsClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    def contents_path(self, remote_path: str) -> str:
        """API path of ``remote_path`` inside the configured repository."""
        return (
            f"/repos/{self.settings.owner}/{self.settings.repo}"
            f"/contents/{quote(remote_path.strip('/'), safe='/')}"
        )

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        if response.is_success:
            return response
        status = response.status_code
        detail = _error_detail(response)
        exc: PortfolioSyncError
        if status in (401, 403):
            exc = AuthenticationError(
                f"Authentication failed for {self.settings.repository}: {detail}."
                " Check your API token."
            )
        elif status == 404:
            exc = NotFoundError(f"Not found: {detail}")
        elif status == 409:
            exc = ConflictError(f"Conflict: {detail}")
        elif status == 422:
            exc = ValidationError(detail)
        else:
            raise RemoteAPIError(status, detail)
        exc.status_code = status
        raise exc

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            raise RemoteTimeoutError(
                f"Request to {self.base_url} timed out after"
                f" {self.settings.timeout:g}s: {exc!r}"
            ) from exc
        except httpx.ConnectError as exc:
            raise RemoteConnectionError(
                f"Cannot connect to {self.base_url}: {exc}"
            ) from exc
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            raise RemoteConnectionError(
                f"Invalid URL for remote host at {self.base_url}: {exc}"
            ) from exc
        except httpx.TransportError as exc:
            raise RemoteConnectionError(
                f"Transport error talking to {self.base_url}: {exc}"
            ) from exc
        except httpx.RequestError as exc:
            raise RemoteConnectionError(
                f"Request to {self.base_url} failed: {exc!r}"
            ) from exc
        return self._handle_response(response)

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", path, **kwargs)

    async def get_content_sha(self, remote_path: str) -> str | None:
        """Return the revision marker of ``remote_path`` on the branch, or None if absent."""
        try:
            response = await self.get(
                self.contents_path(remote_path),
                params={"ref": self.settings.branch},
            )
        except NotFoundError:
            return None
        try:
            data = response.json()
        except json.JSONDecodeError as exc:
            raise RemoteAPIError(response.status_code, f"Invalid JSON: {exc}") from exc
        if isinstance(data, list):
            raise ConflictError(f"Remote path {remote_path} is a directory")
        if not isinstance(data, dict):
            raise RemoteAPIError(response.status_code, f"Unexpected response body: {data!r}")
        sha: str | None = data.get("sha")
        return sha

    async def put_content(
        self,
        remote_path: str,
        content: str,
        message: str,
        *,
        sha: str | None = None,
    ) -> dict[str, Any]:
        """Create or update ``remote_path`` with base64 ``content``.

        ``sha`` guards the write: the remote host rejects it when the file has
        moved on since the marker was read.
        """
        body: dict[str, Any] = {
            "message": message,
            "content": content,
            "branch": self.settings.branch,
        }
        if sha:
            body["sha"] = sha
        response = await self.put(self.contents_path(remote_path), json=body)
        try:
            result = response.json()
        except json.JSONDecodeError:
            return {}
        if not isinstance(result, dict):
            raise RemoteAPIError(response.status_code, f"Unexpected response body: {result!r}")
        return result

"""Typed exceptions and error handling decorator."""

from __future__ import annotations

import functools
from typing import Any, Callable, TypeVar

from rich.console import Console

F = TypeVar("F", bound=Callable[..., Any])

err_console = Console(stderr=True)


class PortfolioSyncError(Exception):
    """Base exception for portfolio-sync."""

    exit_code: int = 1
    status_code: int | None = None


class RemoteConnectionError(PortfolioSyncError):
    """Cannot reach the remote host."""

    exit_code = 2


class AuthenticationError(PortfolioSyncError):
    """Authentication failed (401/403)."""

    exit_code = 3


class NotFoundError(PortfolioSyncError):
    """Resource not found (404)."""

    exit_code = 4


class ConflictError(PortfolioSyncError):
    """Stale revision marker or other conflict (409)."""

    exit_code = 5


class ConfigurationError(PortfolioSyncError):
    """Missing or invalid configuration."""

    exit_code = 6


class ValidationError(PortfolioSyncError):
    """The remote host rejected the request body (422)."""

    exit_code = 7

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or "Validation error")


class RemoteTimeoutError(PortfolioSyncError):
    """A request to the remote host did not finish in time."""

    exit_code = 8


class RemoteAPIError(PortfolioSyncError):
    """Generic API error from the remote host."""

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        super().__init__(f"Remote host returned {status_code}: {detail}")


class RecordNotFoundError(PortfolioSyncError):
    """No project record with the given id."""

    exit_code = 4

    def __init__(self, record_id: int) -> None:
        self.record_id = record_id
        super().__init__(f"Project {record_id} not found")


def error_handler(func: F) -> F:
    """Decorator that catches PortfolioSyncError and prints user-friendly messages."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except PortfolioSyncError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(exc.exit_code)
        except ValueError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(1)

    return wrapper  # type: ignore[return-value]

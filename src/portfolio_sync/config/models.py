"""Pydantic models for portfolio-sync configuration."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from portfolio_sync.config.constants import (
    DEFAULT_API_URL,
    DEFAULT_BRANCH,
    DEFAULT_HOST,
    DEFAULT_OWNER,
    DEFAULT_PORT,
    DEFAULT_REMOTE_PREFIX,
    DEFAULT_REPO,
    DEFAULT_TIMEOUT,
    RECORDS_FILE,
    UPLOADS_DIR,
)


class RemoteSettings(BaseModel):
    """Coordinates and credential for the mirror repository.

    Frozen: one instance is resolved at startup and handed to the client.
    """

    model_config = ConfigDict(frozen=True)

    api_url: str = Field(
        default=DEFAULT_API_URL, description="API base URL, e.g. https://api.github.com",
    )
    owner: str = Field(default=DEFAULT_OWNER, min_length=1)
    repo: str = Field(default=DEFAULT_REPO, min_length=1)
    branch: str = Field(default=DEFAULT_BRANCH, min_length=1)
    token: str | None = Field(default=None, repr=False, description="Bearer token")
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, gt=0, le=600, description="Per-request timeout in seconds",
    )

    @field_validator("api_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v.rstrip("/")

    @property
    def auth_configured(self) -> bool:
        return bool(self.token)

    @property
    def repository(self) -> str:
        return f"{self.owner}/{self.repo}"


class ServerSettings(BaseModel):
    """Where the HTTP server keeps its records and uploads."""

    data_dir: Path = Field(default_factory=Path.cwd)
    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, gt=0, lt=65536)
    remote_prefix: str = DEFAULT_REMOTE_PREFIX
    static_dir: Path | None = None

    @field_validator("remote_prefix")
    @classmethod
    def strip_slashes(cls, v: str) -> str:
        return v.strip("/")

    @property
    def records_file(self) -> Path:
        return self.data_dir / RECORDS_FILE

    @property
    def uploads_dir(self) -> Path:
        return self.data_dir / UPLOADS_DIR


class AppConfig(BaseModel):
    """Root configuration model as stored in config.toml."""

    remote: RemoteSettings = Field(default_factory=RemoteSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    token_file: Path | None = None

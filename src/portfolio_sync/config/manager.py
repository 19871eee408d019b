"""Configuration manager. Reads and writes the TOML config and resolves settings."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import tomli_w
from pydantic import ValidationError as PydanticValidationError

from portfolio_sync.client.errors import ConfigurationError
from portfolio_sync.config.constants import (
    CONFIG_FILE,
    DEFAULT_TOKEN_FILE,
    ENV_BRANCH,
    ENV_DATA_DIR,
    ENV_OWNER,
    ENV_REPO,
    ENV_TOKEN,
    ENV_TOKEN_FILE,
)
from portfolio_sync.config.models import AppConfig, RemoteSettings, ServerSettings

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib

# Keys accepted by ``set_value``. The token is not one of them.
SETTABLE_KEYS = {
    "remote.api_url",
    "remote.owner",
    "remote.repo",
    "remote.branch",
    "remote.timeout",
    "remote.token_file",
    "server.data_dir",
    "server.host",
    "server.port",
    "server.remote_prefix",
    "server.static_dir",
}


class ConfigManager:
    """Manages configuration on disk and resolves effective settings."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path = config_path or CONFIG_FILE
        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        if self._config is None:
            self._config = self._load()
        return self._config

    def _load(self) -> AppConfig:
        if not self.config_path.exists():
            return AppConfig()
        raw = self.config_path.read_bytes()
        try:
            data = tomllib.loads(raw.decode())
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(
                f"Cannot parse {self.config_path}: {exc}"
            ) from exc
        remote = dict(data.get("remote", {}))
        remote.pop("token", None)
        token_file = remote.pop("token_file", None)
        try:
            return AppConfig(
                remote=RemoteSettings(**remote),
                server=ServerSettings(**data.get("server", {})),
                token_file=Path(token_file) if token_file else None,
            )
        except PydanticValidationError as exc:
            raise ConfigurationError(
                f"Invalid configuration in {self.config_path}: {exc}"
            ) from exc

    def save(self) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        data: dict[str, Any] = {}
        remote = self.config.remote.model_dump(
            mode="json", exclude={"token"}, exclude_defaults=True,
        )
        if self.config.token_file:
            remote["token_file"] = str(self.config.token_file)
        if remote:
            data["remote"] = remote
        server = self.config.server.model_dump(
            mode="json", exclude={"data_dir"}, exclude_none=True, exclude_defaults=True,
        )
        # data_dir defaults to the cwd at load time; persist it only once set
        if "data_dir" in self.config.server.model_fields_set:
            server["data_dir"] = str(self.config.server.data_dir)
        if server:
            data["server"] = server
        # Atomic write: write to temp file, then rename
        temp = self.config_path.with_suffix(".tmp")
        fd = os.open(str(temp), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        try:
            os.write(fd, tomli_w.dumps(data).encode())
        finally:
            os.close(fd)
        temp.replace(self.config_path)

    def set_value(self, key: str, value: str) -> None:
        """Set a dotted ``section.field`` key and persist the config."""
        if key == "remote.token":
            raise ConfigurationError(
                f"The token is never stored in the config file. Set {ENV_TOKEN}"
                " or point remote.token_file at a secret file."
            )
        if key not in SETTABLE_KEYS:
            raise ConfigurationError(
                f"Unknown config key '{key}'. Valid keys: {', '.join(sorted(SETTABLE_KEYS))}"
            )
        section, field = key.split(".", 1)
        if key == "remote.token_file":
            self.config.token_file = Path(value) if value else None
            self.save()
            return
        current = getattr(self.config, section)
        updated = current.model_dump(exclude_unset=True)
        updated[field] = value
        try:
            setattr(self.config, section, type(current)(**updated))
        except PydanticValidationError as exc:
            raise ConfigurationError(f"Invalid value for {key}: {exc}") from exc
        self.save()

    def resolve_token(self, token: str | None = None) -> str | None:
        """Resolve the bearer token.

        Precedence: explicit value > env var > token file. The token file is
        taken from the env var, then the config, then ``token.txt`` in the
        working directory.
        """
        if token:
            return token
        env_token = os.environ.get(ENV_TOKEN)
        if env_token:
            return env_token.strip()
        env_file = os.environ.get(ENV_TOKEN_FILE)
        token_file = (
            Path(env_file) if env_file
            else self.config.token_file or Path(DEFAULT_TOKEN_FILE)
        )
        if token_file.is_file():
            secret = token_file.read_text(encoding="utf-8").strip()
            return secret or None
        if env_file or self.config.token_file:
            raise ConfigurationError(f"Token file not found: {token_file}")
        return None

    def resolve_remote(
        self,
        owner: str | None = None,
        repo: str | None = None,
        branch: str | None = None,
        token: str | None = None,
        *,
        require_token: bool = False,
    ) -> RemoteSettings:
        """Resolve the remote repository settings.

        Precedence: CLI flags > env vars > config file > defaults.
        """
        base = self.config.remote
        resolved_token = self.resolve_token(token)
        if require_token and not resolved_token:
            raise ConfigurationError(
                f"No API token configured. Set {ENV_TOKEN}, create"
                f" {DEFAULT_TOKEN_FILE}, or pass --token."
            )
        return base.model_copy(update={
            "owner": owner or os.environ.get(ENV_OWNER) or base.owner,
            "repo": repo or os.environ.get(ENV_REPO) or base.repo,
            "branch": branch or os.environ.get(ENV_BRANCH) or base.branch,
            "token": resolved_token,
        })

    def resolve_server(
        self,
        data_dir: Path | None = None,
        host: str | None = None,
        port: int | None = None,
        static_dir: Path | None = None,
    ) -> ServerSettings:
        """Resolve server settings. Precedence: CLI flags > env vars > config file."""
        base = self.config.server
        env_dir = os.environ.get(ENV_DATA_DIR)
        update: dict[str, Any] = {
            "data_dir": data_dir or (Path(env_dir) if env_dir else base.data_dir),
        }
        if host:
            update["host"] = host
        if port:
            update["port"] = port
        if static_dir:
            update["static_dir"] = static_dir
        return base.model_copy(update=update)

"""Shared test fixtures."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from urllib.parse import unquote

import httpx
import pytest
import respx

from portfolio_sync.config.manager import ConfigManager
from portfolio_sync.config.models import RemoteSettings, ServerSettings
from portfolio_sync.models.sync import SyncFailureKind, SyncResult


class FakeRemote:
    """In-memory stand-in for the contents API, keyed by repository path."""

    def __init__(self) -> None:
        self.files: dict[str, str] = {}
        self.requests: list[tuple[str, str, dict]] = []
        self.fail_writes: dict[str, int] = {}
        self._counter = 0

    def puts(self) -> list[tuple[str, dict]]:
        return [(path, body) for method, path, body in self.requests if method == "PUT"]

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = unquote(request.url.path.split("/contents/", 1)[1])
        body = json.loads(request.content) if request.content else {}
        self.requests.append((request.method, path, body))
        current = self.files.get(path)
        if request.method == "GET":
            if current is None:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json={"path": path, "sha": current})
        if path in self.fail_writes:
            return httpx.Response(self.fail_writes[path], json={"message": "Write rejected"})
        if current is not None and "sha" not in body:
            return httpx.Response(422, json={"message": 'Invalid request. "sha" wasn\'t supplied.'})
        if body.get("sha") != current:
            return httpx.Response(409, json={"message": f"{path} does not match {body.get('sha')}"})
        self._counter += 1
        new_sha = hashlib.sha1(f"{body['content']}{self._counter}".encode()).hexdigest()
        self.files[path] = new_sha
        return httpx.Response(
            201 if current is None else 200,
            json={"content": {"path": path, "sha": new_sha}},
        )


class FakeMirror:
    """Records sync calls instead of talking to a remote host."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[Path, str, str]] = []

    async def sync(self, local_path: Path, remote_path: str, message: str) -> SyncResult:
        self.calls.append((Path(local_path), remote_path, message))
        if self.fail:
            return SyncResult.failure(
                local_path, remote_path, SyncFailureKind.REMOTE_WRITE_FAILED,
                "Remote host returned 500: boom", status_code=500,
            )
        return SyncResult.success(local_path, remote_path, sha="f00", created=True)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from real env vars and any token.txt in the cwd."""
    for var in (
        "PORTFOLIO_SYNC_TOKEN",
        "PORTFOLIO_SYNC_TOKEN_FILE",
        "PORTFOLIO_SYNC_OWNER",
        "PORTFOLIO_SYNC_REPO",
        "PORTFOLIO_SYNC_BRANCH",
        "PORTFOLIO_SYNC_DATA_DIR",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Return a temporary config file path."""
    return tmp_path / "config" / "config.toml"


@pytest.fixture
def config_manager(tmp_config: Path) -> ConfigManager:
    """Return a ConfigManager pointed at a temp config file."""
    return ConfigManager(config_path=tmp_config)


@pytest.fixture
def remote_settings() -> RemoteSettings:
    return RemoteSettings(token="ghp_test", timeout=5.0)


@pytest.fixture
def server_settings(tmp_path: Path) -> ServerSettings:
    return ServerSettings(data_dir=tmp_path / "data")


@pytest.fixture
def fake_remote():
    """Route every request to api.github.com through a FakeRemote."""
    remote = FakeRemote()
    with respx.mock(assert_all_called=False) as router:
        router.route(host="api.github.com").mock(side_effect=remote.handle)
        yield remote


@pytest.fixture
def fake_mirror() -> FakeMirror:
    return FakeMirror()


@pytest.fixture
def failing_mirror() -> FakeMirror:
    return FakeMirror(fail=True)

"""Tests for recursive folder mirroring."""

import asyncio
from pathlib import Path

from portfolio_sync.client.github import ContentsClient
from portfolio_sync.config.models import RemoteSettings
from portfolio_sync.models.sync import SyncFailureKind
from portfolio_sync.sync.mirror import FileMirror, tree_commit_message


async def _sync_tree(settings: RemoteSettings, local_dir: Path, remote_dir: str):
    async with ContentsClient(settings) as client:
        return await FileMirror(client).sync_tree(local_dir, remote_dir)


def _make_tree(root: Path) -> Path:
    root.mkdir()
    (root / "a.txt").write_text("a")
    (root / "sub").mkdir()
    (root / "sub" / "b.txt").write_text("b")
    return root


class TestSyncTree:
    def test_mirrors_every_file_with_relative_paths(self, tmp_path, remote_settings, fake_remote):
        root = _make_tree(tmp_path / "site")
        report = asyncio.run(_sync_tree(remote_settings, root, "portafolioweb"))
        assert report.ok is True
        assert report.kind is None
        assert [path for path, _ in fake_remote.puts()] == [
            "portafolioweb/a.txt",
            "portafolioweb/sub/b.txt",
        ]
        assert sorted(fake_remote.files) == ["portafolioweb/a.txt", "portafolioweb/sub/b.txt"]

    def test_commit_message_names_file_and_folder(self, tmp_path, remote_settings, fake_remote):
        root = _make_tree(tmp_path / "site")
        asyncio.run(_sync_tree(remote_settings, root, "portafolioweb"))
        messages = [body["message"] for _, body in fake_remote.puts()]
        assert messages == [
            tree_commit_message("a.txt", "portafolioweb"),
            tree_commit_message("b.txt", "portafolioweb/sub"),
        ]

    def test_failed_file_does_not_stop_siblings(self, tmp_path, remote_settings, fake_remote):
        root = _make_tree(tmp_path / "site")
        fake_remote.fail_writes["proj/a.txt"] = 500
        report = asyncio.run(_sync_tree(remote_settings, root, "proj"))
        assert [path for path, _ in fake_remote.puts()] == ["proj/a.txt", "proj/sub/b.txt"]
        assert report.ok is False
        assert report.kind == SyncFailureKind.PARTIAL_TREE_FAILURE
        assert [r.remote_path for r in report.failed] == ["proj/a.txt"]
        assert [r.remote_path for r in report.succeeded] == ["proj/sub/b.txt"]
        assert report.failed[0].kind == SyncFailureKind.REMOTE_WRITE_FAILED

    def test_resync_updates_existing_files(self, tmp_path, remote_settings, fake_remote):
        root = _make_tree(tmp_path / "site")
        asyncio.run(_sync_tree(remote_settings, root, "proj"))
        report = asyncio.run(_sync_tree(remote_settings, root, "proj"))
        assert report.ok is True
        assert all(r.created is False for r in report.results)
        assert len(fake_remote.files) == 2

    def test_trailing_slash_on_remote_dir(self, tmp_path, remote_settings, fake_remote):
        root = _make_tree(tmp_path / "site")
        asyncio.run(_sync_tree(remote_settings, root, "/proj/"))
        assert "proj/a.txt" in fake_remote.files

    def test_empty_folder(self, tmp_path, remote_settings, fake_remote):
        (tmp_path / "empty").mkdir()
        report = asyncio.run(_sync_tree(remote_settings, tmp_path / "empty", "proj"))
        assert report.ok is True
        assert report.results == []
        assert fake_remote.requests == []

    def test_missing_folder_is_reported(self, tmp_path, remote_settings, fake_remote):
        report = asyncio.run(_sync_tree(remote_settings, tmp_path / "nope", "proj"))
        assert report.ok is False
        assert report.kind == SyncFailureKind.LOCAL_NOT_FOUND
        assert report.error is not None
        assert fake_remote.requests == []

    def test_file_instead_of_folder_is_reported(self, tmp_path, remote_settings, fake_remote):
        (tmp_path / "a.txt").write_text("a")
        report = asyncio.run(_sync_tree(remote_settings, tmp_path / "a.txt", "proj"))
        assert report.kind == SyncFailureKind.LOCAL_NOT_FOUND
        assert fake_remote.requests == []

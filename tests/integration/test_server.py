"""Integration tests for the HTTP routes."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from portfolio_sync.config.models import ServerSettings
from portfolio_sync.server.app import create_app


def _upload(client: TestClient, name: str = "site.zip", data: bytes = b"PK\x03\x04", **fields):
    form = {"titulo": "Site", "descripcion": "My site", **fields}
    return client.post("/upload", data=form, files={"archivo": (name, data, "application/zip")})


@pytest.fixture
def client(server_settings, fake_mirror):
    with TestClient(create_app(server_settings, mirror=fake_mirror)) as c:
        yield c


class TestProjects:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_list_empty(self, client):
        resp = client.get("/proyectos")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_upload_creates_record(self, client, server_settings, fake_mirror):
        resp = _upload(client)
        assert resp.status_code == 200
        record = resp.json()
        assert record["titulo"] == "Site"
        assert record["descripcion"] == "My site"
        assert record["archivoNombre"].endswith("-site.zip")
        assert record["archivoURL"] == f"/uploads/{record['archivoNombre']}"
        assert record["fecha"]
        stored = server_settings.uploads_dir / record["archivoNombre"]
        assert stored.read_bytes() == b"PK\x03\x04"
        assert client.get("/proyectos").json() == [record]
        [(local, remote, message)] = fake_mirror.calls
        assert local == stored
        assert remote == f"portafolioweb/{record['archivoNombre']}"
        assert message == f"Upload {record['archivoNombre']}"

    def test_newest_listed_first(self, client):
        first = _upload(client, titulo="First").json()
        second = _upload(client, titulo="Second").json()
        assert [p["id"] for p in client.get("/proyectos").json()] == [second["id"], first["id"]]

    def test_upload_without_file(self, client):
        resp = client.post("/upload", data={"titulo": "No file"})
        assert resp.status_code == 400
        assert "error" in resp.json()
        assert client.get("/proyectos").json() == []

    def test_uploaded_file_is_served(self, client):
        record = _upload(client, data=b"hello").json()
        resp = client.get(record["archivoURL"])
        assert resp.status_code == 200
        assert resp.content == b"hello"

    def test_update_merges_fields(self, client):
        record = _upload(client).json()
        resp = client.put(f"/proyectos/{record['id']}", json={"titulo": "Renamed", "id": 1})
        assert resp.json() == {"success": True}
        [updated] = client.get("/proyectos").json()
        assert updated["id"] == record["id"]
        assert updated["titulo"] == "Renamed"
        assert updated["descripcion"] == "My site"

    def test_update_without_body_is_a_no_op(self, client):
        record = _upload(client).json()
        resp = client.put(f"/proyectos/{record['id']}")
        assert resp.status_code == 200
        assert resp.json() == {"success": True}
        assert client.get("/proyectos").json() == [record]

    def test_update_coerces_numbers(self, client):
        record = _upload(client).json()
        resp = client.put(f"/proyectos/{record['id']}", json={"titulo": 5})
        assert resp.json() == {"success": True}
        [updated] = client.get("/proyectos").json()
        assert updated["titulo"] == "5"
        assert updated["descripcion"] == "My site"

    def test_update_unknown_id_still_succeeds(self, client):
        resp = client.put("/proyectos/42", json={"titulo": "x"})
        assert resp.json() == {"success": True}

    def test_delete(self, client):
        record = _upload(client).json()
        resp = client.delete(f"/proyectos/{record['id']}")
        assert resp.json() == {"success": True}
        assert client.get("/proyectos").json() == []

    def test_non_numeric_id(self, client):
        assert client.delete("/proyectos/abc").status_code == 422


class TestMirrorFailures:
    def test_upload_succeeds_when_mirror_fails(self, server_settings, failing_mirror):
        with TestClient(create_app(server_settings, mirror=failing_mirror)) as client:
            resp = _upload(client)
            assert resp.status_code == 200
            assert len(client.get("/proyectos").json()) == 1
        assert len(failing_mirror.calls) == 1

    def test_upload_without_mirror(self, server_settings):
        with TestClient(create_app(server_settings)) as client:
            assert _upload(client).status_code == 200


class TestRemoteMirroring:
    def test_upload_is_mirrored_to_remote(self, server_settings, remote_settings, fake_remote):
        with TestClient(create_app(server_settings, remote_settings)) as client:
            record = _upload(client).json()
        assert list(fake_remote.files) == [f"portafolioweb/{record['archivoNombre']}"]

    def test_remote_rejection_does_not_fail_upload(self, server_settings, remote_settings, fake_remote):
        fake_remote.fail_writes = _AllPaths(403)
        with TestClient(create_app(server_settings, remote_settings)) as client:
            resp = _upload(client)
        assert resp.status_code == 200
        assert fake_remote.files == {}


class TestStaticFiles:
    def test_index_served_at_root(self, tmp_path, fake_mirror):
        www = tmp_path / "www"
        www.mkdir()
        (www / "index.html").write_text("<h1>Portafolio</h1>")
        settings = ServerSettings(data_dir=tmp_path / "data", static_dir=www)
        with TestClient(create_app(settings, mirror=fake_mirror)) as client:
            assert "Portafolio" in client.get("/").text
            assert client.get("/proyectos").json() == []


class _AllPaths(dict):
    """fail_writes mapping that matches every path."""

    def __init__(self, status: int) -> None:
        super().__init__()
        self.status = status

    def __contains__(self, key: object) -> bool:
        return True

    def __getitem__(self, key: str) -> int:
        return self.status

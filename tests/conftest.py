import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from blogadmin.app import create_app
from blogadmin.config import Settings
from blogadmin.infra.document_store import DocumentStore


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        secret_key="test-secret",
        session_max_age=3600,
        uploads_dir=tmp_path / "uploads",
        log_level="WARNING",
    )


@pytest.fixture()
def store() -> DocumentStore:
    return DocumentStore()


@pytest.fixture()
def app(settings, store):
    return create_app(settings, store=store)


@pytest.fixture()
def make_client(app):
    """Factory for clients with independent cookie jars (one per browser)."""

    def _make() -> TestClient:
        return TestClient(app)

    return _make


@pytest.fixture()
def client(make_client) -> TestClient:
    return make_client()


def register(client: TestClient, username: str, password: str):
    return client.post("/register", data={"username": username, "password": password})


def login(client: TestClient, username: str, password: str):
    return client.post(
        "/admin",
        data={"username": username, "password": password},
        follow_redirects=False,
    )


@pytest.fixture()
def alice(make_client) -> TestClient:
    c = make_client()
    assert register(c, "alice", "pw1").status_code == 201
    assert login(c, "alice", "pw1").status_code == 303
    return c


@pytest.fixture()
def bob(make_client) -> TestClient:
    c = make_client()
    assert register(c, "bob", "pw2").status_code == 201
    assert login(c, "bob", "pw2").status_code == 303
    return c

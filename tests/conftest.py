import os
import tempfile
from pathlib import Path

import pytest

_TMP_DIR = Path(tempfile.mkdtemp(prefix="recordshop-tests-"))
DB_PATH = _TMP_DIR / "recordshop.db"
PUBLIC_DIR = _TMP_DIR / "public"
CLIENT_DIST_DIR = _TMP_DIR / "dist"
TOKEN_SECRET = "test-token-secret"

# settings are read when recordshop.config is first imported
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{DB_PATH}"
os.environ["TOKEN_SECRET"] = TOKEN_SECRET
os.environ["PUBLIC_DIR"] = str(PUBLIC_DIR)
os.environ["CLIENT_DIST_DIR"] = str(CLIENT_DIST_DIR)
os.environ["SEED_GENRES"] = "true"

from fastapi.testclient import TestClient  # noqa: E402

from recordshop.main import app  # noqa: E402

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def client():
    if DB_PATH.exists():
        DB_PATH.unlink()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def quiet_client():
    """Client that returns 500 responses instead of re-raising server errors."""
    if DB_PATH.exists():
        DB_PATH.unlink()
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


def register(client, username="alice", password="pw1"):
    response = client.post("/api/register", json={"username": username, "password": password})
    assert response.status_code == 201, response.text
    return response.json()


def sign_in(client, username="alice", password="pw1"):
    response = client.post("/api/sign-in", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice(client):
    register(client, "alice", "pw1")
    return sign_in(client, "alice", "pw1")


@pytest.fixture
def bob(client):
    register(client, "bob", "pw2")
    return sign_in(client, "bob", "pw2")


def create_listing(client, token, **overrides):
    data = {
        "artist": "Queen",
        "album": "News of the World",
        "genre": "1",
        "condition": "VG+",
        "price": "20",
        "info": "-",
    }
    data.update(overrides)
    files = {"image": ("cover.png", PNG_BYTES, "image/png")}
    return client.post("/api/create-listing", data=data, files=files, headers=auth_header(token))


@pytest.fixture
def listing(client, alice):
    response = create_listing(client, alice["token"])
    assert response.status_code == 201, response.text
    return response.json()

"""Shared fixtures: isolated database, app clients for both storage backends."""

from pathlib import Path
from typing import Dict, Tuple

import pytest
from fastapi.testclient import TestClient

from main import create_app
from services.storage.remote_storage import RemoteBlobStorage
from utils.app_config import AppConfig
from utils.database_init import AsyncDatabaseInitializer

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
BLOB_BASE_URL = "https://account.blob.core.windows.net/images"


class FakeBlobClient:
    """In-memory stand-in for `AzureBlobClient`."""

    def __init__(self) -> None:
        self.blobs: Dict[str, Tuple[bytes, str]] = {}
        self.fail_uploads = False
        self.fail_deletes = False
        self.closed = False

    async def upload_bytes(self, data: bytes, proposed_name: str, mime_type: str) -> Tuple[str, str]:
        if self.fail_uploads:
            raise ConnectionError("blob service unavailable")
        self.blobs[proposed_name] = (data, mime_type)
        return f"{BLOB_BASE_URL}/{proposed_name}", proposed_name

    async def delete_by_name(self, name: str) -> bool:
        if self.fail_deletes:
            raise ConnectionError("blob service unavailable")
        return self.blobs.pop(name, None) is not None

    async def exists_by_name(self, name: str) -> bool:
        return name in self.blobs

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def db_dir(tmp_path, monkeypatch) -> Path:
    path = tmp_path / "db"
    monkeypatch.setenv("DATABASE_DIR", str(path))
    monkeypatch.delenv("DATABASE_RESET_ON_STARTUP", raising=False)
    return path


@pytest.fixture
def db_initializer(db_dir) -> AsyncDatabaseInitializer:
    return AsyncDatabaseInitializer()


@pytest.fixture
def upload_dir(tmp_path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def config(upload_dir) -> AppConfig:
    return AppConfig(jwt_secret="test-secret", upload_dir=upload_dir, max_upload_bytes=1024)


@pytest.fixture
def client(db_dir, config):
    """App client using the local filesystem backend."""
    with TestClient(create_app(config)) as test_client:
        yield test_client


@pytest.fixture
def blob_client() -> FakeBlobClient:
    return FakeBlobClient()


@pytest.fixture
def remote_client(db_dir, config, blob_client):
    """App client using remote storage backed by `blob_client`."""
    app = create_app(config, storage=RemoteBlobStorage(blob_client))
    with TestClient(app) as test_client:
        yield test_client


def auth_headers(client: TestClient, email: str = "owner@example.com", username: str = "owner") -> Dict[str, str]:
    """Register and log in a user, returning a bearer Authorization header."""
    client.post("/user/register", json={"email": email, "password": "s3cret-pass", "username": username})
    response = client.post("/user/login", json={"email": email, "password": "s3cret-pass"})
    assert response.status_code == 200
    # Keep cookie-based auth out of tests that pass headers explicitly.
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['token']}"}


def create_image(client: TestClient, headers: Dict[str, str], title: str = "sunset.png") -> int:
    response = client.post("/image/create", json={"title": title}, headers=headers)
    assert response.status_code == 201
    return response.json()["content"]["id"]


def upload(client: TestClient, headers, image_id: int, data: bytes = PNG_BYTES,
           filename: str = "sunset.png", mime_type: str = "image/png"):
    return client.post(
        f"/image/{image_id}/upload",
        files={"file": (filename, data, mime_type)},
        headers=headers,
    )

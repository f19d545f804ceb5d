"""Shared fixtures: temporary SQLite store, fast bcrypt, stub mailer and local object store."""

import sqlite3
from pathlib import Path
from typing import Generator, Iterator

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from config.settings import settings
from infrastructure.db.sqlite import SQLiteUserRepository, create_schema
from infrastructure.images.pillow_transformer import PillowImageTransformer
from infrastructure.mail.stub_mailer import StubMailer
from infrastructure.security.jose_signer import JoseTokenSigner
from infrastructure.security.passlib_hasher import PasslibCredentialHasher
from infrastructure.storage.local_store import LocalObjectStore


@pytest.fixture
def image_file(tmp_path: Path):
    """Factory writing a small PNG into tmp_path."""
    def _make(name: str = "upload.png", size=(400, 300), mode: str = "RGB", color=(200, 30, 30)) -> Path:
        path = tmp_path / name
        Image.new(mode, size, color).save(path, format="PNG")
        return path
    return _make


@pytest.fixture
def conn() -> Iterator[sqlite3.Connection]:
    connection = sqlite3.connect(":memory:", check_same_thread=False)
    create_schema(connection)
    try:
        yield connection
    finally:
        connection.close()


@pytest.fixture
def repo(conn: sqlite3.Connection) -> SQLiteUserRepository:
    return SQLiteUserRepository(conn)


@pytest.fixture(scope="session")
def hasher() -> PasslibCredentialHasher:
    # минимальное число раундов bcrypt, чтобы тесты не тормозили
    return PasslibCredentialHasher(rounds=4)


@pytest.fixture
def signer() -> JoseTokenSigner:
    return JoseTokenSigner(secret_key="test-secret")


@pytest.fixture
def mailer() -> StubMailer:
    return StubMailer()


@pytest.fixture
def store(tmp_path: Path) -> LocalObjectStore:
    return LocalObjectStore(str(tmp_path / "public"), "http://testserver/static")


@pytest.fixture
def transformer() -> PillowImageTransformer:
    return PillowImageTransformer()


@pytest.fixture
def client(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    hasher: PasslibCredentialHasher,
    signer: JoseTokenSigner,
    mailer: StubMailer,
    store: LocalObjectStore,
) -> Generator[TestClient, None, None]:
    """App wired to a fresh database file and in-process adapters."""
    from main import app
    from infrastructure.web.dependencies import (
        get_mailer,
        get_object_store,
        get_password_hasher,
        get_token_signer,
    )

    monkeypatch.setattr(settings, "DB_PATH", str(tmp_path / "app.db"))
    monkeypatch.setattr(settings, "TEMP_DIR", str(tmp_path / "tmp"))

    app.dependency_overrides[get_password_hasher] = lambda: hasher
    app.dependency_overrides[get_token_signer] = lambda: signer
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_object_store] = lambda: store
    try:
        with TestClient(app, raise_server_exceptions=False) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()

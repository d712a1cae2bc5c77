# tests/conftest.py
import os
import tempfile

# app 설정은 import 시점에 읽히므로 먼저 환경변수 지정
_TMP_DIR = tempfile.mkdtemp(prefix="wedding-gallery-test-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'app.db')}"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["STORAGE_DIR"] = os.path.join(_TMP_DIR, "media")
os.environ["LOG_DIR"] = os.path.join(_TMP_DIR, "logs")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.api.deps import get_storage
from app.database import get_db, init_db
from app.services.storage_service import LocalObjectStore
from main import app
from tests.helpers import make_image_bytes


@pytest.fixture
def session_factory(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'gallery.db'}",
        connect_args={"check_same_thread": False}
    )
    init_db(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def storage(tmp_path):
    return LocalObjectStore(str(tmp_path / "blobs"), "/media")


@pytest.fixture
def use_storage():
    """라우트에서 쓸 스토리지 교체"""
    def _use(store):
        app.dependency_overrides[get_storage] = lambda: store
        return store
    return _use


@pytest.fixture
def client(session_factory, storage, use_storage):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    use_storage(storage)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def png_bytes():
    return make_image_bytes(2000, 1000, "PNG")


@pytest.fixture
def upload(client, png_bytes):
    """POST /upload 헬퍼"""
    def _upload(guest_name="Sam", data=None, filename="photo.png", content_type="image/png"):
        return client.post(
            "/upload",
            files={"image": (filename, data if data is not None else png_bytes, content_type)},
            data={"guestName": guest_name},
        )
    return _upload

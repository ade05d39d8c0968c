# tests/conftest.py
import os
import tempfile

# Settings are read once at import time: point them at throwaway locations
# before anything from `app` is imported.
_TMP_ROOT = tempfile.mkdtemp(prefix="woodland-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_ROOT}/default.db"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_ROOT, "uploads")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from app.core.storage_utils import LocalBlobStorage, get_storage  # noqa: E402
from app.database import build_engine, get_session  # noqa: E402
from app.main import app  # noqa: E402


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'gallery.db'}")
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def storage(tmp_path):
    return LocalBlobStorage(tmp_path / "uploads", "/uploads")


@pytest.fixture
def client(engine, storage):
    def _session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _session_override
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def upload(client):
    """Upload a small PNG and return the JSON record."""

    def _upload(name="Jane Doe", email="jane@example.com", description="Misty pines", filename="pines.png"):
        response = client.post(
            "/upload",
            data={"name": name, "email": email, "description": description},
            files={"image": (filename, b"\x89PNG\r\n\x1a\nfake", "image/png")},
        )
        assert response.status_code == 200, response.text
        return response.json()

    return _upload

import os
import tempfile

import pytest

# Settings are read at import time, so the environment is fixed before the app is imported
_TMP_DIR = tempfile.mkdtemp(prefix="gallery-tests-")
DB_PATH = os.path.join(_TMP_DIR, "gallery-test.db")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{DB_PATH}"
os.environ["ENVIRONMENT"] = "development"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "correct-horse-battery"
os.environ["ADMIN_PASSWORD_HASH"] = ""
os.environ["SEED_GALLERY"] = "false"
os.environ["SESSION_BACKEND"] = "database"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["RATE_LIMIT_ENABLED"] = "true"

from fastapi.testclient import TestClient  # noqa: E402

from gallery_api.main import app  # noqa: E402
from gallery_api.utils.rate_limit import limiter  # noqa: E402

ADMIN_CREDENTIALS = {"username": "admin", "password": "correct-horse-battery"}


@pytest.fixture()
def client():
    """App client on a fresh database; startup creates the tables and the admin user."""
    limiter.reset()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    if os.path.exists(DB_PATH):
        os.remove(DB_PATH)


@pytest.fixture()
def admin_credentials():
    return dict(ADMIN_CREDENTIALS)


@pytest.fixture()
def auth_client(client, admin_credentials):
    r = client.post("/api/auth/login", json=admin_credentials)
    assert r.status_code == 200, r.text
    return client


@pytest.fixture()
def sample_item():
    return {
        "title": "Urban Landscape",
        "category": "photography",
        "type": "image",
        "image": "http://x/1.jpg",
        "description": "city scene",
        "height": "h-64",
        "featured": True,
        "tags": ["urban"],
    }

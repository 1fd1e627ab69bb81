import os

# Must be set before shared.auth builds its CryptContext
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from main import create_app
from shared.config import Settings
from shared.storage import DatabaseStorage, MemoryStorage

ADMIN_EMAIL = "admin@ecole.com"
ADMIN_PASSWORD = "admin23"


@pytest.fixture
def settings():
    return Settings(
        storage_backend="memory",
        seed_defaults=True,
        default_admin_email=ADMIN_EMAIL,
        default_admin_password=ADMIN_PASSWORD,
        session_secret="test-secret",
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def login(client):
    def _login(email=ADMIN_EMAIL, password=ADMIN_PASSWORD):
        response = client.post("/api/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return response.json()["user"]
    return _login


@pytest.fixture
def make_user(client, login):
    """Create an account as the admin and return it; leaves the admin logged in."""
    def _make_user(email, role, password="secret123", **extra):
        login()
        response = client.post("/api/users", json={
            "email": email,
            "password": password,
            "confirmPassword": password,
            "firstName": "Test",
            "lastName": role.capitalize(),
            "role": role,
            **extra,
        })
        assert response.status_code == 201, response.text
        return response.json()
    return _make_user


@pytest.fixture
def make_group(client):
    def _make_group(name="6ème A"):
        response = client.post("/api/groups", json={"name": name, "academicYear": "2024-2025"})
        assert response.status_code == 201, response.text
        return response.json()
    return _make_group


@pytest.fixture(params=["memory", "database"])
async def storage(request, tmp_path):
    if request.param == "memory":
        backend = MemoryStorage()
    else:
        backend = DatabaseStorage(f"sqlite+aiosqlite:///{tmp_path / 'school.db'}")
    await backend.init()
    yield backend
    await backend.close()


@pytest.fixture
def second_client(client):
    """Another browser on the same running app: own cookie jar, shared storage."""
    return TestClient(client.app)

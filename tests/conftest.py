import os

# Must be set before app.core.settings is imported
os.environ["USE_MOCK_DB"] = "true"
os.environ["MOCK_DB_PATH"] = ":memory:"
os.environ["GEOCODING_PROVIDER"] = "none"

import pytest
from fastapi.testclient import TestClient

import app.config.firebase as firebase
import app.services.analytics_service as analytics_service
import app.services.auth_service as auth_service
import app.services.incident_service as incident_service
import app.services.leaderboard_service as leaderboard_service
import app.services.photo_upload_service as photo_upload_service
import app.services.user_service as user_service
from app.services.geocoding import resolver
from app.config.mock_firestore import MockFirestore
from app.config.mock_storage import MockBucket
from app.main import app
from app.models.user import UserRole

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def mock_backend(tmp_path, monkeypatch):
    """Fresh in-memory database, temp bucket and service singletons per test."""
    db = MockFirestore(":memory:")
    monkeypatch.setattr(firebase, "db", db)
    monkeypatch.setattr(firebase, "bucket", MockBucket(str(tmp_path / "bucket")))
    for module, name in [
        (user_service, "_user_service"),
        (auth_service, "_auth_service"),
        (incident_service, "_incident_service"),
        (photo_upload_service, "_photo_upload_service"),
        (leaderboard_service, "_leaderboard_service"),
        (analytics_service, "_analytics_service"),
        (resolver, "_provider_instance"),
    ]:
        monkeypatch.setattr(module, name, None)
    return db


@pytest.fixture
def db(mock_backend):
    return mock_backend


@pytest.fixture
def client():
    return TestClient(app)


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def signup(client):
    """Sign up a citizen and return (user, headers)."""

    def _signup(email="citizen@example.com", name="Coastal Citizen", password=PASSWORD):
        resp = client.post("/auth/signup", json={"email": email, "password": password, "name": name})
        assert resp.status_code == 201, resp.text
        body = resp.json()
        return body["user"], auth_header(body["token"])

    return _signup


@pytest.fixture
def staff(client):
    """Create a staff account of the given role and log it in through the matching portal."""

    def _staff(role: UserRole, email=None, name="Staff Member"):
        email = email or f"{role.value}@example.com"
        auth_service.get_auth_service().create_staff_user(email, PASSWORD, name, role)
        resp = client.post("/auth/login", json={"email": email, "password": PASSWORD})
        assert resp.status_code == 200, resp.text
        body = resp.json()
        return body["user"], auth_header(body["token"])

    return _staff


@pytest.fixture
def submit(client):
    def _submit(headers, latitude=19.05, longitude=72.85, description="Mangroves cut along the creek", **location):
        payload = {
            "description": description,
            "location": {"latitude": latitude, "longitude": longitude, **location},
        }
        resp = client.post("/incidents", json=payload, headers=headers)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _submit

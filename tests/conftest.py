"""Shared pytest fixtures for the portfolio backend tests."""

import pytest
import requests
from fastapi.testclient import TestClient

from core.database import Database
from crud.user_crud import create_user
from main import create_app
from services.media_store import MediaStore

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "correct-horse-battery"
ADMIN_PICTURE = "https://example.com/admin.png"


class FakeResponse:
    def __init__(self, status_code: int, body: dict):
        self.status_code = status_code
        self._body = body

    def json(self):
        return self._body


class FakeCloudinary:
    """Stands in for ``requests.Session`` and records calls to the Cloudinary API."""

    def __init__(self):
        self.calls = []
        self.fail_destroy = False
        self.fail_upload = False
        # Replaces the 200 body returned for uploads when set
        self.upload_body = None
        self._counter = 0

    def post(self, url, data=None, files=None, timeout=None):
        self.calls.append({"url": url, "data": dict(data or {}), "files": files})
        if url.endswith("/destroy"):
            if self.fail_destroy:
                raise requests.ConnectionError("cloudinary unreachable")
            return FakeResponse(200, {"result": "ok"})
        if url.endswith("/upload"):
            if self.fail_upload:
                return FakeResponse(400, {"error": {"message": "Invalid image file"}})
            if self.upload_body is not None:
                return FakeResponse(200, self.upload_body)
            self._counter += 1
            resource_type = url.rsplit("/", 2)[-2]
            public_id = f"{data.get('folder')}/asset{self._counter}"
            return FakeResponse(200, {
                "public_id": public_id,
                "secure_url": f"https://res.cloudinary.com/demo/{resource_type}/upload/{public_id}",
            })
        return FakeResponse(404, {"error": {"message": "Unknown endpoint"}})

    def get(self, url, auth=None, timeout=None):
        self.calls.append({"url": url, "data": {}, "files": None})
        return FakeResponse(200, {"status": "ok"})

    @property
    def destroyed(self) -> list[str]:
        return [c["data"]["public_id"] for c in self.calls if c["url"].endswith("/destroy")]

    @property
    def uploads(self) -> list[dict]:
        return [c for c in self.calls if c["url"].endswith("/upload")]


@pytest.fixture
def cloudinary():
    return FakeCloudinary()


@pytest.fixture
def media_store(cloudinary):
    return MediaStore(
        cloud_name="demo",
        api_key="key123",
        api_secret="secret456",
        upload_preset="portfolio_unsigned",
        http=cloudinary,
    )


@pytest.fixture
def database():
    """In-memory SQLite database shared across threads."""
    db = Database("sqlite://")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    s = database.session()
    yield s
    s.close()


@pytest.fixture
def admin_user(database):
    s = database.session()
    try:
        return create_user(s, ADMIN_USERNAME, ADMIN_PASSWORD, ADMIN_PICTURE)
    finally:
        s.close()


@pytest.fixture
def client(database, media_store):
    app = create_app(database=database, media_store=media_store)
    return TestClient(app)


@pytest.fixture
def auth_client(client, admin_user):
    """Client carrying a valid session cookie."""
    response = client.post("/api/users/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client

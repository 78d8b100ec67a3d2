"""
Shared pytest fixtures for the Quill API test suite.
Every test gets its own SQLite file database and a fake image host.
"""

import itertools
import os
import tempfile

# Must be set before the app modules read their configuration
_IMPORT_DIR = tempfile.mkdtemp(prefix="quill-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_IMPORT_DIR, "import.db")
os.environ["ENV"] = "test"
os.environ["JWT_SECRET"] = "test-secret-key-do-not-use-in-production"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.main import app
from app.database import Base, build_engine, get_db
from app.dependencies import get_image_storage
from app.errors import UploadError
from app.services.storage import ImageStorage


class FakeImageStorage(ImageStorage):
    """Records uploads instead of talking to the image host"""

    def __init__(self):
        self.stored = []
        self.fail = False

    def store(self, data: bytes, filename: str) -> str:
        if self.fail:
            raise UploadError()
        self.stored.append((filename, data))
        return f"https://images.example.com/quill_uploads/{len(self.stored)}-{filename}"


@pytest.fixture
def db_engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'quill.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def image_storage():
    return FakeImageStorage()


@pytest.fixture
def client(session_factory, image_storage):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_storage] = lambda: image_storage

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(token):
        return {"Authorization": f"Bearer {token}"}
    return _headers


_counter = itertools.count(1)


@pytest.fixture
def make_user(client):
    """Register a user through the API; returns the response body (includes token)"""
    def _make_user(name=None, email=None, password="secret1"):
        n = next(_counter)
        response = client.post("/api/users", json={
            "name": name or f"User {n}",
            "email": email or f"user{n}@example.com",
            "password": password,
        })
        assert response.status_code == 201, response.text
        return response.json()
    return _make_user


@pytest.fixture
def make_category(client, auth_headers):
    def _make_category(token, name=None):
        response = client.post(
            "/api/categories",
            json={"name": name or f"Category {next(_counter)}"},
            headers=auth_headers(token),
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _make_category


@pytest.fixture
def make_post(client, auth_headers):
    def _make_post(token, category_id, **overrides):
        n = next(_counter)
        payload = {
            "title": f"Post number {n}",
            "slug": f"post-number-{n}",
            "excerpt": "A short teaser",
            "content": "<p>Body</p>",
            "imageUrl": "https://images.example.com/cover.png",
            "category": category_id,
        }
        payload.update(overrides)
        response = client.post("/api/posts", json=payload, headers=auth_headers(token))
        assert response.status_code == 201, response.text
        return response.json()
    return _make_post


@pytest.fixture
def author(make_user):
    return make_user(name="Ann", email="ann@x.com", password="secret1")


@pytest.fixture
def category(make_category, author):
    return make_category(author["token"], "Travel")

"""
Pytest fixtures: an isolated application and in-memory database per test.
"""
import pytest
from fastapi.testclient import TestClient
from app.core.config import Settings
from app.db.session import init_db
from app.main import create_app

TEST_SECRET_KEY = "test-secret-key"


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        SECRET_KEY=TEST_SECRET_KEY,
    )


@pytest.fixture
def app(test_settings):
    application = create_app(test_settings)
    init_db(application.state.engine)
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(app):
    """A session on the same database the app serves from."""
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def login(client):
    """Register (if needed) and log in; returns (auth headers, user id)."""
    def _login(username="alice", password="secret1"):
        client.post("/api/register", json={"username": username, "password": password})
        response = client.post("/api/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        body = response.json()
        return {"Authorization": f"Bearer {body['token']}"}, body["user"]["id"]
    return _login

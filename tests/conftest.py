"""Test fixtures and configuration."""
from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from donezo.config import Settings
from donezo.database import Database, init_db
from donezo.main import create_app

TEST_PASSWORD = "testpassword"


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Get test settings."""
    return Settings(
        password=TEST_PASSWORD,
        database_url="sqlite://",
        environment="test",
        otel_enabled=False,
    )


@pytest.fixture
def password() -> str:
    """Get the login secret the test app is configured with."""
    return TEST_PASSWORD


@pytest.fixture(scope="function")
def db(test_settings) -> Generator[Database, None, None]:
    """Create a fresh in-memory store."""
    database = init_db(test_settings)
    yield database
    database.dispose()


@pytest.fixture(scope="function")
def app(test_settings, db) -> FastAPI:
    """Create an application bound to the test store."""
    return create_app(test_settings, db=db)


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def authenticated_client(client: TestClient) -> TestClient:
    """Create a client holding a valid session cookie."""
    response = client.post("/api/login", json={"password": TEST_PASSWORD})
    assert response.status_code == 200
    return client


@pytest.fixture
def api_token(authenticated_client: TestClient) -> str:
    """Create an API token and return its value."""
    response = authenticated_client.post("/api/tokens", json={"name": "fixture"})
    assert response.status_code == 200
    return response.json()["token"]


@pytest.fixture
def bearer_client(app, api_token: str) -> Generator[TestClient, None, None]:
    """Create a client authenticated only by bearer token."""
    with TestClient(app) as test_client:
        test_client.headers["Authorization"] = f"Bearer {api_token}"
        yield test_client

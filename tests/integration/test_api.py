"""Integration tests for login, logout and API authorization."""

from fastapi.testclient import TestClient


def test_health_endpoint(client: TestClient):
    """Test the health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_login_wrong_password(client: TestClient):
    """Test login with a wrong password."""
    response = client.post("/api/login", json={"password": "wrong"})
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}
    assert "session" not in client.cookies


def test_login_sets_session_cookie(client: TestClient, password: str):
    """Test successful login."""
    response = client.post("/api/login", json={"password": password})
    assert response.status_code == 200
    assert response.json() == {"success": True}

    cookie = response.headers["set-cookie"]
    assert cookie.startswith("session=")
    assert "HttpOnly" in cookie
    assert "Max-Age=604800" in cookie
    assert "Path=/" in cookie
    assert "samesite=strict" in cookie.lower()
    assert len(client.cookies["session"]) == 64


def test_each_login_gets_a_new_session(client: TestClient, password: str):
    first = client.post("/api/login", json={"password": password})
    second = client.post("/api/login", json={"password": password})
    assert first.cookies["session"] != second.cookies["session"]


def test_login_missing_password(client: TestClient):
    """Test login without a password field."""
    response = client.post("/api/login", json={})
    assert response.status_code == 422
    assert "password" in response.json()["error"]


def test_api_requires_auth(client: TestClient):
    """Test API access without credentials."""
    response = client.get("/api/todos")
    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_invalid_session_cookie_rejected(client: TestClient):
    response = client.get("/api/todos", headers={"Cookie": "session=not-a-real-session"})
    assert response.status_code == 401


def test_malformed_authorization_header_rejected(client: TestClient, api_token: str):
    """Only the exact Bearer form is accepted."""
    client.cookies.clear()
    for header in (f"bearer {api_token}", f"Token {api_token}", api_token):
        response = client.get("/api/todos", headers={"Authorization": header})
        assert response.status_code == 401


def test_logout_invalidates_session(authenticated_client: TestClient):
    """Test logout."""
    session_id = authenticated_client.cookies["session"]

    response = authenticated_client.post("/api/logout")
    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert "session" not in authenticated_client.cookies

    # Replaying the old cookie no longer works
    response = authenticated_client.get("/api/todos", headers={"Cookie": f"session={session_id}"})
    assert response.status_code == 401


def test_logout_without_session(client: TestClient):
    """Logout succeeds even when not logged in."""
    response = client.post("/api/logout")
    assert response.status_code == 200
    assert response.json() == {"success": True}


def test_bearer_store_failure_is_internal_error(bearer_client: TestClient, db):
    """A failed token lookup is a server error, not an auth failure."""
    from sqlalchemy import text

    with db.session() as s:
        s.execute(text("DROP TABLE api_tokens"))

    response = bearer_client.get("/api/todos")
    assert response.status_code == 500
    assert "error" in response.json()


MALFORMED_JSON = {"content": "{not json", "headers": {"Content-Type": "application/json"}}


def test_malformed_body_without_credentials_is_unauthorized(client: TestClient):
    """Credentials are checked before the body is reported as invalid."""
    assert client.post("/api/todos", **MALFORMED_JSON).status_code == 401
    assert client.put("/api/todos/1", **MALFORMED_JSON).status_code == 401
    assert client.put("/api/todos/reorder", **MALFORMED_JSON).status_code == 401
    assert client.post("/api/tokens", **MALFORMED_JSON).status_code == 401


def test_malformed_body_with_credentials_is_invalid(authenticated_client: TestClient):
    response = authenticated_client.post("/api/todos", **MALFORMED_JSON)
    assert response.status_code == 422
    assert "error" in response.json()


def test_malformed_token_body_with_bearer_is_unauthorized(bearer_client: TestClient):
    """Token routes keep refusing bearer credentials."""
    assert bearer_client.post("/api/tokens", **MALFORMED_JSON).status_code == 401
    assert bearer_client.post("/api/todos", **MALFORMED_JSON).status_code == 422


def test_malformed_login_body_is_invalid(client: TestClient):
    assert client.post("/api/login", **MALFORMED_JSON).status_code == 422

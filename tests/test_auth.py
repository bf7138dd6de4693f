from sqlalchemy import create_engine, text

from gallery_api.config import settings
from gallery_api.utils.sessions import SessionSigner

COOKIE = settings.SESSION_COOKIE_NAME


def test_login_then_me_returns_same_user(client, admin_credentials):
    r = client.post("/api/auth/login", json=admin_credentials)
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Login successful"
    assert body["user"]["username"] == "admin"
    assert "password" not in body["user"]

    set_cookie = r.headers["set-cookie"].lower()
    assert COOKIE in set_cookie
    assert "httponly" in set_cookie
    assert "max-age=86400" in set_cookie

    r = client.get("/api/auth/me")
    assert r.status_code == 200
    assert r.json()["user"] == body["user"]


def test_wrong_password_is_rejected_without_cookie(client):
    r = client.post("/api/auth/login", json={"username": "admin", "password": "nope"})
    assert r.status_code == 401
    assert "set-cookie" not in r.headers
    body = r.json()
    assert body["message"] == "Invalid username or password"
    assert body["status"] == 401
    assert body["path"] == "/api/auth/login"
    assert "timestamp" in body


def test_unknown_username_is_rejected_without_cookie(client):
    r = client.post("/api/auth/login", json={"username": "ghost", "password": "whatever"})
    assert r.status_code == 401
    assert "set-cookie" not in r.headers
    assert r.json()["message"] == "Invalid username or password"


def test_login_requires_username_and_password(client):
    r = client.post("/api/auth/login", json={"username": "admin"})
    assert r.status_code == 400
    assert "password: Field required" in r.json()["message"]


def test_me_without_session_is_unauthenticated(client):
    r = client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json()["message"] == "Authentication required"


def test_logout_then_me_is_unauthenticated(auth_client):
    token = auth_client.cookies.get(COOKIE)
    assert token

    r = auth_client.post("/api/auth/logout")
    assert r.status_code == 200
    assert r.json() == {"message": "Logout successful"}

    r = auth_client.get("/api/auth/me")
    assert r.status_code == 401

    # The server-side session is gone, not just the cookie
    auth_client.cookies.clear()
    r = auth_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


def test_logout_without_session_is_not_an_error(client):
    r = client.post("/api/auth/logout")
    assert r.status_code == 200
    r = client.post("/api/auth/logout")
    assert r.status_code == 200


def test_bearer_header_carries_the_session(auth_client):
    token = auth_client.cookies.get(COOKIE)
    auth_client.cookies.clear()

    r = auth_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["user"]["username"] == "admin"


def test_tampered_token_is_rejected(auth_client):
    token = auth_client.cookies.get(COOKIE)
    auth_client.cookies.clear()

    forged = SessionSigner(secret_key="someone-elses-secret").dumps("made-up-session-id")
    for candidate in (token[:-2] + "xx", forged, "garbage"):
        r = auth_client.get("/api/auth/me", headers={"Authorization": f"Bearer {candidate}"})
        assert r.status_code == 401


def test_login_replaces_previous_session(auth_client, admin_credentials):
    first = auth_client.cookies.get(COOKIE)

    r = auth_client.post("/api/auth/login", json=admin_credentials)
    assert r.status_code == 200
    second = auth_client.cookies.get(COOKIE)
    assert second != first

    auth_client.cookies.clear()
    r = auth_client.get("/api/auth/me", headers={"Authorization": f"Bearer {first}"})
    assert r.status_code == 401
    r = auth_client.get("/api/auth/me", headers={"Authorization": f"Bearer {second}"})
    assert r.status_code == 200


def test_independent_logins_get_independent_sessions(client, admin_credentials):
    tokens = []
    for _ in range(2):
        client.cookies.clear()
        r = client.post("/api/auth/login", json=admin_credentials)
        assert r.status_code == 200
        tokens.append(client.cookies.get(COOKIE))
    client.cookies.clear()

    assert tokens[0] != tokens[1]
    for token in tokens:
        r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert r.status_code == 200


def test_eleventh_login_attempt_is_rate_limited(client, admin_credentials):
    for _ in range(10):
        r = client.post("/api/auth/login", json={"username": "admin", "password": "wrong"})
        assert r.status_code == 401

    # Valid credentials do not help once the budget is spent
    r = client.post("/api/auth/login", json=admin_credentials)
    assert r.status_code == 429
    assert "set-cookie" not in r.headers
    body = r.json()
    assert body["message"] == "Too many login attempts, please try again later."
    assert body["status"] == 429

    # Other endpoints still have budget left
    assert client.get("/api/health").status_code == 200


def test_login_budget_is_per_client(client, admin_credentials):
    for _ in range(10):
        client.post(
            "/api/auth/login",
            json={"username": "admin", "password": "wrong"},
            headers={"X-Forwarded-For": "203.0.113.7"},
        )

    r = client.post(
        "/api/auth/login", json=admin_credentials, headers={"X-Forwarded-For": "203.0.113.7"}
    )
    assert r.status_code == 429

    r = client.post(
        "/api/auth/login", json=admin_credentials, headers={"X-Forwarded-For": "198.51.100.20"}
    )
    assert r.status_code == 200


def test_malformed_login_attempts_count_toward_login_budget(client, admin_credentials):
    for _ in range(10):
        r = client.post("/api/auth/login", json={})
        assert r.status_code == 400

    r = client.post("/api/auth/login", json=admin_credentials)
    assert r.status_code == 429
    assert r.json()["message"] == "Too many login attempts, please try again later."


def test_invalid_login_body_is_not_logged_as_database_error(client, caplog):
    r = client.post("/api/auth/login", json={"username": "admin"})
    assert r.status_code == 400
    assert "Database session error" not in caplog.text


def test_expired_session_is_unauthenticated(auth_client):
    assert auth_client.get("/api/auth/me").status_code == 200

    engine = create_engine(settings.DATABASE_URL.replace("+aiosqlite", ""))
    try:
        with engine.begin() as conn:
            result = conn.execute(text("UPDATE sessions SET expires_at = '2000-01-01 00:00:00.000000'"))
            assert result.rowcount == 1
    finally:
        engine.dispose()

    r = auth_client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json()["message"] == "Authentication required"

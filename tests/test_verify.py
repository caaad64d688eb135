from datetime import datetime, timedelta, timezone

from signup_auth_svc.security.tokens import TokenService


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


def test_verify_valid_token(client, app):
    token = app.state.tokens.issue("user-1", "jane@ex.com")

    response = client.get("/api/auth/verify", headers=_bearer(token))
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Token is valid"
    assert body["data"]["user"]["userId"] == "user-1"
    assert body["data"]["user"]["email"] == "jane@ex.com"
    assert {"iat", "exp"} <= set(body["data"]["user"])


def test_verify_does_not_need_user_row(client, app):
    # Stateless sessions: the token alone is enough, even for an id with no stored user.
    token = app.state.tokens.issue("no-such-user", "ghost@ex.com")
    assert client.get("/api/auth/verify", headers=_bearer(token)).status_code == 200


def test_missing_authorization_header(client):
    response = client.get("/api/auth/verify")
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Access token required"}
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_non_bearer_scheme(client):
    response = client.get("/api/auth/verify", headers={"Authorization": "Basic dXNlcjpwYXNz"})
    assert response.status_code == 401
    assert response.json()["message"] == "Access token required"


def test_token_signed_with_other_secret(client):
    token = TokenService("another-secret").issue("user-1", "jane@ex.com")

    response = client.get("/api/auth/verify", headers=_bearer(token))
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid or expired token"}


def test_expired_token(client, app):
    issued = datetime.now(timezone.utc) - timedelta(hours=24, seconds=1)
    token = app.state.tokens.issue("user-1", "jane@ex.com", now=issued)

    response = client.get("/api/auth/verify", headers=_bearer(token))
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token"


def test_garbage_token(client):
    response = client.get("/api/auth/verify", headers=_bearer("not.a.token"))
    assert response.status_code == 401

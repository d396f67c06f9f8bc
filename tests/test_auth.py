from datetime import timedelta

from taskgate.schemas.user import TokenClaims
from taskgate.security import token_service
from taskgate.stores import CredentialStore


def test_register_returns_token_for_new_user(client):
    resp = client.post(
        "/auth/register",
        json={"username": "u1", "email": "e1@example.com", "password": "p1p1p1"},
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    user = body["user"]
    assert user["username"] == "u1"
    assert user["email"] == "e1@example.com"

    claims = token_service.verify(body["token"])
    assert (claims.id, claims.username, claims.email) == (user["id"], "u1", "e1@example.com")


def test_register_never_exposes_password(client):
    body = client.post(
        "/auth/register",
        json={"username": "bob", "email": "bob@example.com", "password": "hunter22"},
    ).json()
    assert "password" not in body["user"]
    assert "hashed_password" not in body["user"]
    assert "hunter22" not in str(body)


def test_register_duplicate_email_is_conflict(client, register):
    register("u1", email="e1@example.com")
    resp = client.post(
        "/auth/register",
        json={"username": "other", "email": "e1@example.com", "password": "secret123"},
    )
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Username or email already exists"}


def test_register_duplicate_username_is_conflict(client, register):
    register("u1")
    resp = client.post(
        "/auth/register",
        json={"username": "u1", "email": "fresh@example.com", "password": "secret123"},
    )
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_register_requires_all_fields(client):
    resp = client.post("/auth/register", json={"username": "u1", "password": "secret123"})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "All fields are required"}


def test_register_rejects_short_password(client):
    resp = client.post(
        "/auth/register",
        json={"username": "u1", "email": "e1@example.com", "password": "12345"},
    )
    assert resp.status_code == 400
    assert "at least 6" in resp.json()["error"]


def test_register_rejects_malformed_json(client):
    resp = client.post(
        "/auth/register",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_login_success(client, register):
    register("carol", password="secret123")
    resp = client.post("/auth/login", json={"email": "carol@example.com", "password": "secret123"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["user"]["username"] == "carol"
    assert token_service.verify(body["token"]).email == "carol@example.com"


def test_login_wrong_password_and_unknown_email_look_the_same(client, register):
    register("dave", password="secret123")
    wrong_password = client.post("/auth/login", json={"email": "dave@example.com", "password": "nope-nope"})
    unknown_email = client.post("/auth/login", json={"email": "ghost@example.com", "password": "secret123"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"success": False, "error": "Invalid credentials"}


def test_login_requires_email_and_password(client):
    resp = client.post("/auth/login", json={"email": "someone@example.com"})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Email and password are required"}


def test_profile_returns_stored_user(client, register):
    body = register("erin")
    resp = client.get("/auth/profile", headers={"Authorization": f"Bearer {body['token']}"})
    assert resp.status_code == 200
    user = resp.json()["user"]
    assert user["id"] == body["user"]["id"]
    assert user["avatar_url"] == ""
    assert "created_at" in user
    assert "hashed_password" not in user


def test_profile_without_credentials_is_401_with_empty_body(client):
    resp = client.get("/auth/profile")
    assert resp.status_code == 401
    assert resp.content == b""


def test_profile_with_non_bearer_scheme_is_401(client):
    resp = client.get("/auth/profile", headers={"Authorization": "Basic dXNlcjpwYXNz"})
    assert resp.status_code == 401


def test_profile_with_invalid_token_is_403_with_empty_body(client):
    resp = client.get("/auth/profile", headers={"Authorization": "Bearer garbage.token.value"})
    assert resp.status_code == 403
    assert resp.content == b""


def test_profile_with_expired_token_is_403(client, register):
    user = register("frank")["user"]
    expired = token_service.issue(
        TokenClaims(id=user["id"], username=user["username"], email=user["email"]),
        expires_delta=timedelta(seconds=-5),
    )
    resp = client.get("/auth/profile", headers={"Authorization": f"Bearer {expired}"})
    assert resp.status_code == 403


def test_profile_of_deleted_user_is_404(client, register, session):
    body = register("gina")
    CredentialStore(session).delete_user(body["user"]["id"])

    resp = client.get("/auth/profile", headers={"Authorization": f"Bearer {body['token']}"})
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "User not found"}


def test_creating_task_for_deleted_user_is_404(client, register, session):
    body = register("hank")
    CredentialStore(session).delete_user(body["user"]["id"])

    resp = client.post(
        "/tasks",
        json={"titulo": "orphan"},
        headers={"Authorization": f"Bearer {body['token']}"},
    )
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "User not found"}

from datetime import datetime

import pytest
from jose import JWTError, jwt

from staynest.core.config import settings
from staynest.core.security import (
    create_access_token,
    create_refresh_token,
    get_password_hash,
    verify_access_token,
    verify_password,
)

from conftest import auth_headers


def test_password_hash_roundtrip():
    hashed = get_password_hash("s3cret")
    assert hashed != "s3cret"
    assert verify_password("s3cret", hashed)
    assert not verify_password("wrong", hashed)


def test_refresh_token_is_not_a_session_token():
    refresh = create_refresh_token({"sub": "u1"})
    with pytest.raises(JWTError):
        verify_access_token(refresh)


def test_access_token_claims():
    token = create_access_token({"sub": "u1", "role": "user"})
    payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    assert payload["sub"] == "u1"
    assert payload["type"] == "access"
    assert payload["exp"] > payload["iat"]


async def test_register_and_login(client):
    res = await client.post(
        "/api/auth/register",
        json={"name": "Ada", "email": "ada@example.com", "password": "pw123456"},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["tokenType"] == "bearer"
    assert body["user"]["email"] == "ada@example.com"
    assert body["user"]["role"] == "user"

    res = await client.post(
        "/api/auth/login", json={"email": "ada@example.com", "password": "pw123456"}
    )
    assert res.status_code == 200
    token = res.json()["accessToken"]

    me = await client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["name"] == "Ada"


async def test_register_duplicate_email(client, guest):
    res = await client.post(
        "/api/auth/register",
        json={"name": "Again", "email": guest.email, "password": "pw123456"},
    )
    assert res.status_code == 400
    assert res.json() == {"error": "Email exists"}


async def test_login_failures(client, make_user):
    await make_user(email="bob@example.com", password="right-one")

    missing = await client.post("/api/auth/login", json={"email": "bob@example.com"})
    assert missing.status_code == 400

    wrong = await client.post(
        "/api/auth/login", json={"email": "bob@example.com", "password": "wrong"}
    )
    assert wrong.status_code == 401
    assert wrong.json() == {"error": "Invalid credentials"}


async def test_refresh_rotates_and_logout_revokes(client, make_user):
    await make_user(email="eve@example.com", password="pw123456")
    login = await client.post(
        "/api/auth/login", json={"email": "eve@example.com", "password": "pw123456"}
    )
    first = login.json()["refreshToken"]

    res = await client.post("/api/auth/refresh", json={"refreshToken": first})
    assert res.status_code == 200
    second = res.json()["refreshToken"]
    assert second != first

    # the rotated-out token is dead
    stale = await client.post("/api/auth/refresh", json={"refreshToken": first})
    assert stale.status_code == 401

    out = await client.post("/api/auth/logout", json={"refreshToken": second})
    assert out.json() == {"ok": True}
    revoked = await client.post("/api/auth/refresh", json={"refreshToken": second})
    assert revoked.status_code == 401


async def test_refresh_rejects_garbage(client):
    res = await client.post("/api/auth/refresh", json={"refreshToken": "nope"})
    assert res.status_code == 401
    assert (await client.post("/api/auth/refresh", json={})).status_code == 400


async def test_logout_without_body(client):
    res = await client.post("/api/auth/logout")
    assert res.status_code == 200
    assert res.json() == {"ok": True}


async def test_session_for_anonymous_caller(client):
    res = await client.get("/api/session")
    assert res.status_code == 200
    assert res.json() == {"data": None}


async def test_session_for_bad_token(client):
    res = await client.get("/api/session", headers={"Authorization": "Bearer junk"})
    assert res.status_code == 200
    assert res.json() == {"data": None}


async def test_session_for_signed_in_caller(client, guest):
    res = await client.get("/api/session", headers=auth_headers(guest))
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["user"]["id"] == guest.id
    assert data["user"]["email"] == "guest@example.com"
    assert datetime.fromisoformat(data["expiresAt"]) > datetime.utcnow()


async def test_me_requires_session(client):
    res = await client.get("/api/users/me")
    assert res.status_code == 401


async def test_verify_admin(client, admin, guest):
    anonymous = await client.get("/api/auth/verify-admin")
    assert anonymous.status_code == 401
    assert anonymous.json() == {"error": "Unauthorized", "isAdmin": False}

    regular = await client.get("/api/auth/verify-admin", headers=auth_headers(guest))
    assert regular.status_code == 403
    assert regular.json()["isAdmin"] is False

    ok = await client.get("/api/auth/verify-admin", headers=auth_headers(admin))
    assert ok.status_code == 200
    assert ok.json() == {"isAdmin": True}

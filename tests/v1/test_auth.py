# tests/v1/test_auth.py
"""Tests for authentication endpoints."""

from __future__ import annotations

from fastapi import status

from threadboard.models import User


def test_register_user_success(client, db_session) -> None:
    """Registration stores a hashed password and never echoes it."""
    response = client.post(
        "/api/v1/auth/register",
        json={"username": "dana", "password": "hunter22", "email": "dana@example.com"},
    )

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["username"] == "dana"
    assert data["email"] == "dana@example.com"
    assert data["email_notifications"] is True
    assert "password" not in data and "password_hash" not in data

    stored = db_session.get(User, data["id"])
    assert stored.password_hash != "hunter22"
    assert stored.password_hash.startswith("$pbkdf2-sha256$")


def test_register_duplicate_username(client, alice) -> None:
    """A taken username is rejected with 409."""
    response = client.post(
        "/api/v1/auth/register",
        json={"username": "alice", "password": "whatever"},
    )

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["detail"] == "Username already exists"


def test_register_rejects_malformed_email(client) -> None:
    response = client.post(
        "/api/v1/auth/register",
        json={"username": "erin", "password": "pw", "email": "not-an-address"},
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_login_success_marks_user_online(client, alice, db_session) -> None:
    """Valid credentials return a token and flip presence on."""
    response = client.post(
        "/api/v1/auth/login",
        json={"username": "alice", "password": "secret-password"},
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["access_token"]
    assert data["token_type"] == "bearer"
    assert data["user"]["username"] == "alice"
    db_session.refresh(alice)
    assert alice.is_online is True

    me = client.get(
        "/api/v1/users/me",
        headers={"Authorization": f"Bearer {data['access_token']}"},
    )
    assert me.status_code == status.HTTP_200_OK
    assert me.json()["id"] == alice.id


def test_login_wrong_password(client, alice) -> None:
    response = client.post(
        "/api/v1/auth/login",
        json={"username": "alice", "password": "wrong"},
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Invalid username or password"


def test_login_unknown_user(client) -> None:
    response = client.post(
        "/api/v1/auth/login",
        json={"username": "nobody", "password": "secret-password"},
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_logout_marks_user_offline(client, alice, alice_headers, db_session) -> None:
    alice.is_online = True
    db_session.commit()

    response = client.post("/api/v1/auth/logout", headers=alice_headers)

    assert response.status_code == status.HTTP_200_OK
    db_session.refresh(alice)
    assert alice.is_online is False


def test_invalid_token_is_rejected(client) -> None:
    response = client.get("/api/v1/users/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED

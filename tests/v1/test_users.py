# tests/v1/test_users.py
"""Tests for presence counts and the caller's profile."""

from __future__ import annotations

from fastapi import status


def test_user_counts(client, alice, bob, carol, db_session) -> None:
    bob.is_online = True
    db_session.commit()

    assert client.get("/api/v1/users/count").json() == {"count": 3}
    assert client.get("/api/v1/users/online").json() == {"count": 1}


class TestProfileUpdate:
    """Test profile update endpoint functionality."""

    def test_get_my_profile_success(self, client, alice, alice_headers) -> None:
        response = client.get("/api/v1/users/me", headers=alice_headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["username"] == "alice"
        assert data["email"] == "alice@example.com"
        assert "password_hash" not in data

    def test_get_my_profile_unauthorized(self, client) -> None:
        response = client.get("/api/v1/users/me")

        assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)

    def test_update_email_only(self, client, alice, alice_headers, db_session) -> None:
        response = client.patch(
            "/api/v1/users/me",
            json={"email": "new@example.com"},
            headers=alice_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["email"] == "new@example.com"
        db_session.refresh(alice)
        assert alice.email == "new@example.com"
        assert alice.email_notifications is True

    def test_opt_out_of_emails(self, client, alice, alice_headers, db_session) -> None:
        response = client.patch(
            "/api/v1/users/me",
            json={"email_notifications": False},
            headers=alice_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        db_session.refresh(alice)
        assert alice.email_notifications is False
        assert alice.email == "alice@example.com"

    def test_empty_email_clears_address(self, client, alice, alice_headers, db_session) -> None:
        response = client.patch("/api/v1/users/me", json={"email": ""}, headers=alice_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["email"] is None
        db_session.refresh(alice)
        assert alice.email is None

    def test_empty_payload_changes_nothing(self, client, alice, alice_headers, db_session) -> None:
        response = client.patch("/api/v1/users/me", json={}, headers=alice_headers)

        assert response.status_code == status.HTTP_200_OK
        db_session.refresh(alice)
        assert alice.email == "alice@example.com"
        assert alice.email_notifications is True

    def test_invalid_email_rejected(self, client, alice_headers) -> None:
        response = client.patch(
            "/api/v1/users/me",
            json={"email": "nope"},
            headers=alice_headers,
        )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "valid email address" in response.json()["detail"][0]["msg"]

    def test_whitespace_email_clears_address(self, client, alice, alice_headers, db_session) -> None:
        response = client.patch("/api/v1/users/me", json={"email": "   "}, headers=alice_headers)

        assert response.status_code == status.HTTP_200_OK
        db_session.refresh(alice)
        assert alice.email is None

    def test_address_is_trimmed(self, client, alice, alice_headers) -> None:
        response = client.patch(
            "/api/v1/users/me",
            json={"email": "  fresh@example.com "},
            headers=alice_headers,
        )

        assert response.json()["email"] == "fresh@example.com"

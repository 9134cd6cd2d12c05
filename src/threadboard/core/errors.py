"""Domain errors raised by the forum services.

Services raise these instead of ``HTTPException`` so they stay usable outside
a request; ``threadboard.main`` maps them onto HTTP responses.
"""

from __future__ import annotations

from fastapi import status


class ForumError(RuntimeError):
    """Base class for all forum-level failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationError(ForumError):
    """Raised when a write carries malformed or inconsistent fields."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(ForumError):
    """Raised when an operation references a record that does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class AuthorizationError(ForumError):
    """Raised when the actor does not own the resource being mutated."""

    status_code = status.HTTP_403_FORBIDDEN


class AuthenticationError(AuthorizationError):
    """Raised when credentials do not identify a user."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ConflictError(ForumError):
    """Raised when a uniqueness rule is violated, e.g. a taken username."""

    status_code = status.HTTP_409_CONFLICT

"""User-related Pydantic schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def _blank_email_to_none(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip() or None
    return value


class RegisterRequest(BaseModel):
    """Schema for account registration."""

    username: str = Field(..., min_length=1, max_length=64, description="Unique handle")
    password: str = Field(..., min_length=1, max_length=256, description="Plain password")
    email: EmailStr | None = Field(None, description="Optional address for notification emails")
    email_notifications: bool = Field(True, description="Opt into notification emails")

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, v: Any) -> Any:
        """Treat an empty address as no address."""
        return _blank_email_to_none(v)


class LoginRequest(BaseModel):
    """Schema for login submissions."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserPublic(BaseModel):
    """Author information safe to show to any reader (no credential, no email)."""

    id: int
    username: str
    is_online: bool
    last_seen: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class UserProfile(UserPublic):
    """The caller's own account, including notification preferences."""

    email: str | None
    email_notifications: bool


class LoginResponse(BaseModel):
    """Response returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field("bearer", description="Token type")
    user: UserProfile


class ProfileUpdateRequest(BaseModel):
    """Schema for updating email preferences."""

    email: EmailStr | None = Field(None, description="New address; empty string clears it")
    email_notifications: bool | None = Field(None, description="Opt in or out of emails")

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, v: Any) -> Any:
        """Treat an empty address as no address."""
        return _blank_email_to_none(v)


class CountResponse(BaseModel):
    """Single integer statistic."""

    count: int

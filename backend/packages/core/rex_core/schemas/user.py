"""
User schemas.

Request and response models for user-related operations.
"""

import re

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from .common import UTCDateTime

USERNAME_PATTERN = re.compile(r"^[a-z0-9_]{3,30}$")


def _normalize_username(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip().lstrip("@").lower()
    if not USERNAME_PATTERN.match(value):
        raise ValueError("Username must be 3-30 characters of letters, digits or underscores")
    return value


class UserResponse(BaseModel):
    """Public user model."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    username: str
    created_at: UTCDateTime


class UserProfile(UserResponse):
    """
    Authenticated user's own profile.

    This is the identity record the feed logic consumes:
    uid, name, username and the following list.
    """

    email: str | None = None
    phone_verified: bool = False
    following: list[str] = Field(default_factory=list)


class ProfileCreate(BaseModel):
    """Profile completion request, sent once after identity-provider sign-up."""

    name: str = Field(min_length=1, max_length=100)
    username: str | None = None
    email: EmailStr | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value

    @field_validator("username")
    @classmethod
    def _check_username(cls, value: str | None) -> str | None:
        return _normalize_username(value)


class ProfileUpdate(BaseModel):
    """Profile update request."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    username: str | None = None

    @field_validator("username")
    @classmethod
    def _check_username(cls, value: str | None) -> str | None:
        return _normalize_username(value)

"""Schemas for user and profile payloads."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from .base import CamelModel


class UserSummary(CamelModel):
    """Author block embedded in posts and comments."""

    id: UUID
    username: str
    fullname: str
    profile_image: str | None = None


class ProfileResponse(UserSummary):
    email: str | None = None
    created_at: datetime
    posts_count: int = 0
    followers_count: int = 0
    following_count: int = 0
    is_following: bool = False
    is_self: bool = False


class ProfileImageResponse(CamelModel):
    success: bool = True
    profile_image: str


__all__ = ["UserSummary", "ProfileResponse", "ProfileImageResponse"]

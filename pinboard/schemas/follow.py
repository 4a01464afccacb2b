"""Schemas supporting follower APIs."""
from __future__ import annotations

from uuid import UUID

from .base import CamelModel


class FollowResponse(CamelModel):
    success: bool = True
    user_id: UUID
    following: bool
    followers_count: int
    following_count: int


__all__ = ["FollowResponse"]

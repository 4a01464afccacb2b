"""Pydantic schemas for pins, likes and comments."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from .base import CamelModel
from .users import ProfileResponse, UserSummary


class PaginationResponse(CamelModel):
    current_page: int
    total_pages: int
    has_next_page: bool
    total_posts: int


class CommentResponse(CamelModel):
    id: UUID
    text: str
    created_at: datetime
    user: UserSummary


class PostSummary(CamelModel):
    """Card-level representation used by the feed and pin grids."""

    id: UUID
    title: str
    description: str | None = None
    image_url: str | None = None
    created_at: datetime
    likes_count: int = 0
    comments_count: int = 0
    liked: bool = False
    user: UserSummary


class PostDetail(PostSummary):
    comments: list[CommentResponse] = Field(default_factory=list)


class FeedResponse(CamelModel):
    success: bool = True
    posts: list[PostSummary]
    pagination: PaginationResponse


class PinDetailResponse(CamelModel):
    success: bool = True
    post: PostDetail
    related: list[PostSummary] = Field(default_factory=list)


class ProfilePageResponse(CamelModel):
    success: bool = True
    user: ProfileResponse
    posts: list[PostSummary]


class LikeResponse(CamelModel):
    success: bool = True
    liked: bool
    likes_count: int


class CommentCreatedResponse(CamelModel):
    success: bool = True
    comment: CommentResponse


class PostCreatedResponse(CamelModel):
    success: bool = True
    post: PostSummary


__all__ = [
    "PaginationResponse",
    "CommentResponse",
    "PostSummary",
    "PostDetail",
    "FeedResponse",
    "PinDetailResponse",
    "ProfilePageResponse",
    "LikeResponse",
    "CommentCreatedResponse",
    "PostCreatedResponse",
]

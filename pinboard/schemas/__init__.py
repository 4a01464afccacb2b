"""Convenience exports for schema layer."""
from .auth import AuthResponse, LoginRequest, RegisterRequest
from .base import CamelModel, ErrorResponse
from .follow import FollowResponse
from .posts import (
    CommentCreatedResponse,
    CommentResponse,
    FeedResponse,
    LikeResponse,
    PaginationResponse,
    PinDetailResponse,
    PostCreatedResponse,
    PostDetail,
    PostSummary,
    ProfilePageResponse,
)
from .users import ProfileImageResponse, ProfileResponse, UserSummary

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "RegisterRequest",
    "CamelModel",
    "ErrorResponse",
    "FollowResponse",
    "CommentCreatedResponse",
    "CommentResponse",
    "FeedResponse",
    "LikeResponse",
    "PaginationResponse",
    "PinDetailResponse",
    "PostCreatedResponse",
    "PostDetail",
    "PostSummary",
    "ProfilePageResponse",
    "ProfileImageResponse",
    "ProfileResponse",
    "UserSummary",
]

"""Convenience exports for ORM models."""
from .follow import Follow
from .post import Post, PostComment, PostLike
from .user import User

__all__ = [
    "Follow",
    "Post",
    "PostLike",
    "PostComment",
    "User",
]

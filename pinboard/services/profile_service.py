import logging
from typing import Any
from uuid import UUID

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Post, User
from .follow_service import get_follow_stats
from .storage_service import (
    StorageConfigurationError,
    StorageUploadError,
    UnsupportedImageError,
    asset_key_from_url,
    discard_asset,
    store_image,
)

logger = logging.getLogger(__name__)


def get_user_by_username(db: Session, username: str) -> User:
    user = db.scalar(select(User).where(User.username == username))
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def build_profile(db: Session, user: User, *, viewer_id: UUID | None) -> dict[str, Any]:
    """Assemble the profile header: identity, post count and follow counters."""

    stats = get_follow_stats(db, user_id=user.id, viewer_id=viewer_id)
    posts_count = db.scalar(select(func.count(Post.id)).where(Post.user_id == user.id)) or 0
    is_self = viewer_id == user.id
    return {
        "id": user.id,
        "username": user.username,
        "fullname": user.fullname,
        "profile_image": user.profile_image_url,
        # Email is only shown to its owner.
        "email": user.email if is_self else None,
        "created_at": user.created_at,
        "posts_count": int(posts_count),
        "followers_count": stats.followers_count,
        "following_count": stats.following_count,
        "is_following": stats.is_following,
        "is_self": is_self,
    }


async def update_profile_image(db: Session, *, user: User, file: UploadFile | None) -> User:
    """Store a new profile picture, point the user at it and drop the one it replaces."""

    if file is None or not (file.filename or "").strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file provided")

    try:
        asset = await store_image(file, folder="avatars")
    except UnsupportedImageError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except StorageConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    except StorageUploadError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    previous_key = asset_key_from_url(user.profile_image_url)
    user.profile_image_url = asset.url
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to update profile image for user %s", user.id)
        discard_asset(asset.key)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload image",
        ) from exc

    db.refresh(user)
    discard_asset(previous_key)
    return user

"""Follow toggling and follower/following counters."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import cast
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import delete, exists, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Follow, User

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FollowStats:
    user_id: UUID
    followers_count: int
    following_count: int
    is_following: bool


def _edge(follower_id: UUID, target_id: UUID):
    return (Follow.follower_id == follower_id) & (Follow.following_id == target_id)


def _is_following(db: Session, follower_id: UUID, target_id: UUID) -> bool:
    return bool(db.scalar(select(exists().where(_edge(follower_id, target_id)))))


def toggle_follow(db: Session, *, follower: User, target_id: UUID) -> FollowStats:
    """Flip whether ``follower`` follows ``target_id`` and return the target's fresh counters.

    One Follow row is both sides of the relationship, so adding or deleting it
    updates the follower's ``following`` and the target's ``followers`` together.
    """

    follower_id = cast(UUID, follower.id)
    if follower_id == target_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot follow yourself")
    if db.get(User, target_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    try:
        if _is_following(db, follower_id, target_id):
            db.execute(delete(Follow).where(_edge(follower_id, target_id)))
        else:
            db.add(Follow(follower_id=follower_id, following_id=target_id))
        db.commit()
    except IntegrityError:
        # Another request created the same row first; report whatever is stored now.
        db.rollback()
        logger.info("Concurrent follow toggle by %s on %s", follower_id, target_id)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Follow toggle by %s on %s failed", follower_id, target_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update follow") from exc

    return get_follow_stats(db, user_id=target_id, viewer_id=follower_id)


def get_follow_stats(db: Session, *, user_id: UUID, viewer_id: UUID | None = None) -> FollowStats:
    followers, following = db.execute(
        select(
            select(func.count()).select_from(Follow).where(Follow.following_id == user_id).scalar_subquery(),
            select(func.count()).select_from(Follow).where(Follow.follower_id == user_id).scalar_subquery(),
        )
    ).one()

    return FollowStats(
        user_id=user_id,
        followers_count=int(followers or 0),
        following_count=int(following or 0),
        is_following=viewer_id is not None and viewer_id != user_id and _is_following(db, viewer_id, user_id),
    )


__all__ = ["FollowStats", "toggle_follow", "get_follow_stats"]

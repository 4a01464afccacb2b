"""Business logic for pins: feed pages, pin detail, likes, comments and uploads."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable
from uuid import UUID

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import ColumnElement, func, literal, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Post, PostComment, PostLike, User
from .pagination import Pagination, build_pagination
from .storage_service import (
    StorageConfigurationError,
    StorageUploadError,
    UnsupportedImageError,
    discard_asset,
    store_image,
)

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 120
MAX_DESCRIPTION_LENGTH = 2000
MAX_COMMENT_LENGTH = 500


@dataclass(slots=True)
class FeedPage:
    posts: list[dict[str, Any]]
    pagination: Pagination


@dataclass(slots=True)
class LikeState:
    post_id: UUID
    liked: bool
    likes_count: int


def user_summary(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "username": user.username,
        "fullname": user.fullname,
        "profile_image": user.profile_image_url,
    }


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_filter(query: str | None) -> ColumnElement[bool] | None:
    """Case-insensitive literal match of ``query`` against title or description."""

    term = (query or "").strip()
    if not term:
        return None
    pattern = f"%{_escape_like(term)}%"
    return or_(Post.title.ilike(pattern, escape="\\"), Post.description.ilike(pattern, escape="\\"))


def _post_cards(
    db: Session,
    *,
    filters: Iterable[ColumnElement[bool]] = (),
    viewer_id: UUID | None = None,
    offset: int | None = None,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """Return newest-first post cards with like/comment counters and the viewer's like flag."""

    like_count = select(func.count(PostLike.id)).where(PostLike.post_id == Post.id).scalar_subquery()
    comment_count = select(func.count(PostComment.id)).where(PostComment.post_id == Post.id).scalar_subquery()
    if viewer_id is not None:
        viewer_like = (
            select(func.count(PostLike.id))
            .where(PostLike.post_id == Post.id, PostLike.user_id == viewer_id)
            .scalar_subquery()
        )
    else:
        viewer_like = literal(0)

    statement = (
        select(Post, User, like_count, comment_count, viewer_like)
        .join(User, Post.user_id == User.id)
        .where(*filters)
        .order_by(Post.created_at.desc(), Post.id.desc())
    )
    if offset:
        statement = statement.offset(offset)
    if limit is not None:
        statement = statement.limit(limit)

    cards: list[dict[str, Any]] = []
    for post, author, likes, comments, viewer_liked in db.execute(statement).all():
        cards.append(
            {
                "id": post.id,
                "title": post.title,
                "description": post.description,
                "image_url": post.image_url,
                "created_at": post.created_at,
                "likes_count": int(likes or 0),
                "comments_count": int(comments or 0),
                "liked": bool(viewer_liked),
                "user": user_summary(author),
            }
        )
    return cards


def _count_posts(db: Session, filters: Iterable[ColumnElement[bool]]) -> int:
    return int(db.scalar(select(func.count(Post.id)).where(*filters)) or 0)


def list_feed_page(
    db: Session,
    *,
    viewer_id: UUID | None,
    page: int,
    limit: int,
    query: str | None = None,
) -> FeedPage:
    """Return one page of the global feed, optionally filtered by a search term."""

    filters: list[ColumnElement[bool]] = []
    term_filter = search_filter(query)
    if term_filter is not None:
        filters.append(term_filter)

    total = _count_posts(db, filters)
    pagination = build_pagination(page, limit, total)
    posts = _post_cards(db, filters=filters, viewer_id=viewer_id, offset=pagination.skip, limit=limit)
    return FeedPage(posts=posts, pagination=pagination)


def list_user_posts_page(
    db: Session,
    *,
    owner_id: UUID,
    viewer_id: UUID | None,
    page: int,
    limit: int,
) -> FeedPage:
    filters = [Post.user_id == owner_id]
    total = _count_posts(db, filters)
    pagination = build_pagination(page, limit, total)
    posts = _post_cards(db, filters=filters, viewer_id=viewer_id, offset=pagination.skip, limit=limit)
    return FeedPage(posts=posts, pagination=pagination)


def list_user_posts(db: Session, *, owner_id: UUID, viewer_id: UUID | None) -> list[dict[str, Any]]:
    return _post_cards(db, filters=[Post.user_id == owner_id], viewer_id=viewer_id)


def _get_post_or_404(db: Session, post_id: UUID) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return post


def _comment_payload(comment: PostComment, author: User) -> dict[str, Any]:
    return {
        "id": comment.id,
        "text": comment.text,
        "created_at": comment.created_at,
        "user": user_summary(author),
    }


def get_post_detail(db: Session, *, post_id: UUID, viewer_id: UUID | None) -> dict[str, Any]:
    """Return the pin with its comments plus every other pin as related content."""

    cards = _post_cards(db, filters=[Post.id == post_id], viewer_id=viewer_id)
    if not cards:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    post = cards[0]

    rows = db.execute(
        select(PostComment, User)
        .join(User, PostComment.user_id == User.id)
        .where(PostComment.post_id == post_id)
        .order_by(PostComment.created_at.asc())
    ).all()
    post["comments"] = [_comment_payload(comment, author) for comment, author in rows]

    related = _post_cards(db, filters=[Post.id != post_id], viewer_id=viewer_id)
    return {"post": post, "related": related}


def _like_state(db: Session, post_id: UUID, user_id: UUID) -> LikeState:
    likes_count = db.scalar(select(func.count(PostLike.id)).where(PostLike.post_id == post_id)) or 0
    liked = (
        db.scalar(select(PostLike.id).where(PostLike.post_id == post_id, PostLike.user_id == user_id).limit(1))
        is not None
    )
    return LikeState(post_id=post_id, liked=liked, likes_count=int(likes_count))


def toggle_post_like(db: Session, *, post_id: UUID, user_id: UUID) -> LikeState:
    """Flip the caller's like on a post and report the recomputed state."""

    _get_post_or_404(db, post_id)

    existing = db.scalar(select(PostLike).where(PostLike.post_id == post_id, PostLike.user_id == user_id))
    if existing is None:
        db.add(PostLike(post_id=post_id, user_id=user_id))
    else:
        db.delete(existing)

    try:
        db.commit()
    except IntegrityError:
        # A concurrent request inserted the same like first; report whatever is stored now.
        db.rollback()
        logger.info("Concurrent like toggle on post %s for user %s", post_id, user_id)
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update like") from exc

    return _like_state(db, post_id, user_id)


def add_post_comment(db: Session, *, post_id: UUID, author: User, text: str | None) -> dict[str, Any]:
    """Append a comment to a post after trimming and validating its text."""

    post = _get_post_or_404(db, post_id)
    body = (text or "").strip()
    if not body:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Comment text required")
    if len(body) > MAX_COMMENT_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Comment must be at most {MAX_COMMENT_LENGTH} characters",
        )

    comment = PostComment(post_id=post.id, user_id=author.id, text=body)
    db.add(comment)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to add comment") from exc

    db.refresh(comment)
    return _comment_payload(comment, author)


async def create_post_with_image(
    db: Session,
    *,
    owner: User,
    title: str | None,
    description: str | None,
    file: UploadFile | None,
) -> dict[str, Any]:
    """Store the uploaded image, then create the post that references it."""

    if file is None or not (file.filename or "").strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file provided")

    clean_title = (title or "").strip()
    if not clean_title:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Title is required")
    if len(clean_title) > MAX_TITLE_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Title must be at most {MAX_TITLE_LENGTH} characters",
        )
    clean_description = (description or "").strip() or None
    if clean_description and len(clean_description) > MAX_DESCRIPTION_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters",
        )

    try:
        asset = await store_image(file, folder="posts")
    except UnsupportedImageError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except StorageConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    except StorageUploadError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    post = Post(user_id=owner.id, title=clean_title, description=clean_description, image_url=asset.url)
    try:
        db.add(post)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create post for user %s", owner.id)
        discard_asset(asset.key)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to upload post") from exc

    db.refresh(post)
    return {
        "id": post.id,
        "title": post.title,
        "description": post.description,
        "image_url": post.image_url,
        "created_at": post.created_at,
        "likes_count": 0,
        "comments_count": 0,
        "liked": False,
        "user": user_summary(owner),
    }


__all__ = [
    "FeedPage",
    "LikeState",
    "MAX_COMMENT_LENGTH",
    "add_post_comment",
    "create_post_with_image",
    "get_post_detail",
    "list_feed_page",
    "list_user_posts",
    "list_user_posts_page",
    "search_filter",
    "toggle_post_like",
    "user_summary",
]

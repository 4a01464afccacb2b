"""SQLAlchemy ORM model for application users."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from pinboard.database import Base
from .base import TimestampMixin
from .follow import Follow


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(32), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False)
    fullname = Column(String(100), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    profile_image_url = Column(String(1024), nullable=True)

    posts = relationship(
        "Post",
        back_populates="author",
        cascade="all, delete-orphan",
        order_by="desc(Post.created_at)",
    )
    follower_relations = relationship(
        Follow,
        foreign_keys=[Follow.following_id],
        back_populates="following",
        cascade="all, delete-orphan",
    )
    following_relations = relationship(
        Follow,
        foreign_keys=[Follow.follower_id],
        back_populates="follower",
        cascade="all, delete-orphan",
    )
    post_likes = relationship("PostLike", back_populates="user", cascade="all, delete-orphan")
    post_comments = relationship("PostComment", back_populates="user", cascade="all, delete-orphan")

    @property
    def followers(self) -> list["User"]:
        return [relation.follower for relation in self.follower_relations]

    @property
    def following(self) -> list["User"]:
        return [relation.following for relation in self.following_relations]


__all__ = ["User"]

"""Shared fixtures: a throwaway SQLite database and media directory per test run."""
from __future__ import annotations

import os
import shutil
import tempfile
from io import BytesIO
from pathlib import Path
from typing import Iterator

_RUN_DIR = Path(tempfile.mkdtemp(prefix="pinboard-tests-"))
MEDIA_DIR = _RUN_DIR / "media"

# Configuration must be in place before application modules are imported.
os.environ.setdefault("DATABASE_URL", f"sqlite+pysqlite:///{_RUN_DIR / 'pinboard.db'}")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["STORAGE_BACKEND"] = "local"
os.environ["MEDIA_ROOT"] = str(MEDIA_DIR)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from PIL import Image  # noqa: E402
from sqlalchemy import delete  # noqa: E402

from pinboard.database import Base, SessionLocal, engine  # noqa: E402
from pinboard.main import app  # noqa: E402
from pinboard.models import Follow, Post, PostComment, PostLike, User  # noqa: E402
from pinboard.services.rate_limit import auth_rate_limiter  # noqa: E402

JSON_HEADERS = {"Accept": "application/json"}


@pytest.fixture(scope="session", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    shutil.rmtree(_RUN_DIR, ignore_errors=True)


@pytest.fixture(autouse=True)
def _clean_state() -> Iterator[None]:
    """Remove persisted rows, stored media and throttling state between tests."""

    with SessionLocal() as session:
        session.execute(delete(PostComment))
        session.execute(delete(PostLike))
        session.execute(delete(Follow))
        session.execute(delete(Post))
        session.execute(delete(User))
        session.commit()
    shutil.rmtree(MEDIA_DIR, ignore_errors=True)
    MEDIA_DIR.mkdir(parents=True, exist_ok=True)
    auth_rate_limiter.reset()
    yield


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


def register(client: TestClient, username: str, *, password: str = "secret123", email: str | None = None) -> dict:
    response = client.post(
        "/register",
        json={
            "username": username,
            "email": email or f"{username}@example.com",
            "fullname": username.title(),
            "password": password,
        },
        headers=JSON_HEADERS,
    )
    assert response.status_code == 201, response.text
    return response.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}", **JSON_HEADERS}


def create_post(user_id, title: str, *, description: str | None = None) -> Post:
    with SessionLocal() as session:
        post = Post(user_id=user_id, title=title, description=description, image_url=f"/media/posts/{title}.png")
        session.add(post)
        session.commit()
        session.refresh(post)
        return post


def png_bytes(width: int, height: int) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (width, height), color=(200, 40, 90)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def alice(client: TestClient) -> dict:
    return register(client, "alice")


@pytest.fixture
def bob(client: TestClient) -> dict:
    return register(client, "bob")


__all__ = ["JSON_HEADERS", "MEDIA_DIR", "User", "bearer", "create_post", "png_bytes", "register"]

"""Integration tests for profile pages, own pins and profile pictures."""
from __future__ import annotations

from io import BytesIO
from uuid import UUID

from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from conftest import MEDIA_DIR, bearer, create_post, png_bytes


def test_own_profile_includes_email_and_posts(client: TestClient, alice: dict) -> None:
    create_post(UUID(alice["user"]["id"]), "mine")

    body = client.get("/profile", headers=bearer(alice["accessToken"])).json()

    assert body["success"] is True
    assert body["user"]["username"] == "alice"
    assert body["user"]["email"] == "alice@example.com"
    assert body["user"]["isSelf"] is True
    assert body["user"]["postsCount"] == 1
    assert [post["title"] for post in body["posts"]] == ["mine"]


def test_public_profile_hides_email(client: TestClient, alice: dict, bob: dict) -> None:
    create_post(UUID(bob["user"]["id"]), "bob's pin")

    body = client.get("/users/bob", headers=bearer(alice["accessToken"])).json()

    assert body["user"]["email"] is None
    assert body["user"]["isSelf"] is False
    assert body["user"]["isFollowing"] is False
    assert [post["title"] for post in body["posts"]] == ["bob's pin"]


def test_unknown_profile_is_404(client: TestClient, alice: dict) -> None:
    response = client.get("/users/nobody", headers=bearer(alice["accessToken"]))

    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


def test_profile_pages_render_html(client: TestClient, bob: dict, alice: dict) -> None:
    own = client.get("/profile")
    assert own.status_code == 200
    assert "@alice" in own.text
    assert 'action="/fileupload"' in own.text

    other = client.get("/users/bob")
    assert other.status_code == 200
    assert 'class="follow-btn"' in other.text

    missing = client.get("/users/nobody")
    assert missing.status_code == 404
    assert "text/html" in missing.headers["content-type"]


def test_allpins_lists_only_own_posts_paginated(client: TestClient, alice: dict, bob: dict) -> None:
    alice_id = UUID(alice["user"]["id"])
    for number in range(3):
        create_post(alice_id, f"alice-{number}")
    create_post(UUID(bob["user"]["id"]), "bob-only")

    body = client.get("/allpins", params={"limit": 2}, headers=bearer(alice["accessToken"])).json()

    assert body["pagination"] == {"currentPage": 1, "totalPages": 2, "hasNextPage": True, "totalPosts": 3}
    assert [post["title"] for post in body["posts"]] == ["alice-2", "alice-1"]


def test_fileupload_updates_profile_image(client: TestClient, alice: dict) -> None:
    headers = bearer(alice["accessToken"])

    response = client.post(
        "/fileupload",
        files={"image": ("me.jpg", BytesIO(png_bytes(30, 30)), "image/jpeg")},
        headers=headers,
    )

    assert response.status_code == 200, response.text
    image_url = response.json()["profileImage"]
    assert image_url.startswith("/media/avatars/")
    assert len(list((MEDIA_DIR / "avatars").iterdir())) == 1
    assert client.get("/profile", headers=headers).json()["user"]["profileImage"] == image_url


def test_fileupload_without_file_is_rejected(client: TestClient, alice: dict) -> None:
    response = client.post("/fileupload", headers=bearer(alice["accessToken"]))

    assert response.status_code == 400
    assert response.json() == {"error": "No file provided"}


def test_replacing_profile_image_removes_the_old_file(client: TestClient, alice: dict) -> None:
    headers = bearer(alice["accessToken"])

    urls = [
        client.post(
            "/fileupload",
            files={"image": (f"me-{n}.png", BytesIO(png_bytes(30, 30)), "image/png")},
            headers=headers,
        ).json()["profileImage"]
        for n in range(2)
    ]

    stored = list((MEDIA_DIR / "avatars").iterdir())
    assert len(stored) == 1
    assert urls[1].endswith(stored[0].name)


def test_failed_profile_image_update_removes_new_file(client: TestClient, alice: dict, monkeypatch) -> None:
    def _failing_commit(self) -> None:
        raise SQLAlchemyError("database unavailable")

    monkeypatch.setattr(Session, "commit", _failing_commit)

    response = client.post(
        "/fileupload",
        files={"image": ("me.png", BytesIO(png_bytes(30, 30)), "image/png")},
        headers=bearer(alice["accessToken"]),
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to upload image"}
    avatars = MEDIA_DIR / "avatars"
    assert not avatars.exists() or list(avatars.iterdir()) == []

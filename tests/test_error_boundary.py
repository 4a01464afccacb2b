"""Unexpected failures must surface as a generic 500 for both kinds of caller."""
from __future__ import annotations

import pytest

from conftest import bearer
from pinboard.routers import feed as feed_router


@pytest.fixture
def broken_feed(monkeypatch: pytest.MonkeyPatch) -> None:
    def _explode(*args, **kwargs):
        raise RuntimeError("database exploded: password=hunter2")

    monkeypatch.setattr(feed_router, "list_feed_page", _explode)


def test_json_caller_gets_generic_error(client, alice, broken_feed) -> None:
    response = client.get("/feed", headers=bearer(alice["accessToken"]))

    assert response.status_code == 500
    assert response.json() == {"error": "Server error"}
    assert "hunter2" not in response.text


def test_ajax_header_counts_as_json_caller(client, alice, broken_feed) -> None:
    response = client.get(
        "/feed",
        headers={"Authorization": f"Bearer {alice['accessToken']}", "X-Requested-With": "XMLHttpRequest"},
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Server error"}


def test_browser_gets_error_page(client, alice, broken_feed) -> None:
    response = client.get("/feed", headers={"Authorization": f"Bearer {alice['accessToken']}"})

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("text/html")
    assert "Something went wrong" in response.text
    assert "hunter2" not in response.text


def test_healthcheck_is_unaffected(client, broken_feed) -> None:
    assert client.get("/health").json() == {"status": "ok"}

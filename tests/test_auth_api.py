"""Integration tests for registration, login, sessions and auth throttling."""
from __future__ import annotations

from fastapi.testclient import TestClient

from conftest import JSON_HEADERS, bearer, register
from pinboard.config import get_settings


def test_register_returns_token_and_sets_session_cookie(client: TestClient) -> None:
    body = register(client, "carol")

    assert body["success"] is True
    assert body["tokenType"] == "bearer"
    assert body["accessToken"]
    assert body["user"]["username"] == "carol"
    assert body["user"]["fullname"] == "Carol"
    assert client.cookies.get("access_token")


def test_duplicate_username_and_email_are_conflicts(client: TestClient) -> None:
    register(client, "carol")

    same_name = client.post(
        "/register",
        json={"username": "carol", "email": "other@example.com", "fullname": "C", "password": "secret123"},
        headers=JSON_HEADERS,
    )
    assert same_name.status_code == 409
    assert same_name.json() == {"error": "Username already in use"}

    same_email = client.post(
        "/register",
        json={"username": "carol2", "email": "  CAROL@example.com ", "fullname": "C", "password": "secret123"},
        headers=JSON_HEADERS,
    )
    assert same_email.status_code == 409
    assert same_email.json() == {"error": "Email already registered"}


def test_register_rejects_invalid_username(client: TestClient) -> None:
    response = client.post(
        "/register",
        json={"username": "no spaces!", "email": "x@example.com", "fullname": "X", "password": "secret123"},
        headers=JSON_HEADERS,
    )

    assert response.status_code == 400
    assert "username" in response.json()["error"]


def test_browser_registration_redirects_to_feed(client: TestClient) -> None:
    response = client.post(
        "/register",
        data={"username": "dave", "email": "dave@example.com", "fullname": "Dave", "password": "secret123"},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/feed"
    assert "access_token=" in response.headers["set-cookie"]


def test_login_with_json_and_bad_password(client: TestClient) -> None:
    register(client, "erin", password="correct-horse")

    ok = client.post("/login", json={"username": "erin", "password": "correct-horse"}, headers=JSON_HEADERS)
    assert ok.status_code == 200
    assert ok.json()["user"]["username"] == "erin"

    bad = client.post("/login", json={"username": "erin", "password": "wrong"}, headers=JSON_HEADERS)
    assert bad.status_code == 401
    assert bad.json() == {"error": "Invalid username or password"}


def test_browser_login_failure_redirects_with_error(client: TestClient) -> None:
    response = client.post("/login", data={"username": "ghost", "password": "nope"}, follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"].startswith("/login?error=")


def test_unauthenticated_callers_get_401_json_or_login_redirect(client: TestClient) -> None:
    as_json = client.get("/feed", headers=JSON_HEADERS)
    assert as_json.status_code == 401
    assert as_json.json() == {"error": "Not authenticated"}

    as_xhr = client.post("/posts/00000000-0000-0000-0000-000000000000/like", headers={"X-Requested-With": "XMLHttpRequest"})
    assert as_xhr.status_code == 401

    as_browser = client.get("/feed", follow_redirects=False)
    assert as_browser.status_code == 303
    assert as_browser.headers["location"] == "/login"


def test_invalid_token_is_rejected(client: TestClient) -> None:
    response = client.get("/feed", headers=bearer("not-a-jwt"))

    assert response.status_code == 401


def test_logged_in_visitor_skips_login_page(client: TestClient) -> None:
    register(client, "frank")

    response = client.get("/login", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/feed"


def test_login_page_renders_for_guests(client: TestClient) -> None:
    response = client.get("/?error=Bad+things")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert "Bad things" in response.text


def test_logout_clears_cookie(client: TestClient) -> None:
    register(client, "gina")

    response = client.get("/logout", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/"
    cookie_header = response.headers["set-cookie"]
    assert "access_token=" in cookie_header
    assert "Max-Age=0" in cookie_header


def test_auth_attempts_are_throttled(client: TestClient) -> None:
    for _ in range(10):
        attempt = client.post("/login", json={"username": "nobody", "password": "x"}, headers=JSON_HEADERS)
        assert attempt.status_code == 401

    blocked = client.post("/login", json={"username": "nobody", "password": "x"}, headers=JSON_HEADERS)

    assert blocked.status_code == 429
    assert blocked.json() == {"error": "Too many login/register attempts. Please try again later."}
    assert int(blocked.headers["retry-after"]) > 0


def test_forwarded_for_header_does_not_reset_the_throttle(client: TestClient) -> None:
    statuses = [
        client.post(
            "/login",
            json={"username": "nobody", "password": "x"},
            headers={**JSON_HEADERS, "X-Forwarded-For": f"10.0.0.{number}"},
        ).status_code
        for number in range(12)
    ]

    assert statuses[:10] == [401] * 10
    assert statuses[10:] == [429, 429]


def test_forwarded_for_is_honoured_behind_a_trusted_proxy(client: TestClient, monkeypatch) -> None:
    monkeypatch.setattr(get_settings(), "trust_proxy_headers", True)

    for number in range(12):
        attempt = client.post(
            "/login",
            json={"username": "nobody", "password": "x"},
            headers={**JSON_HEADERS, "X-Forwarded-For": f"10.0.0.{number}, 172.16.0.1"},
        )
        assert attempt.status_code == 401


def test_health_and_api_info(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/api").json()["service"] == "Pinboard"

"""Async HTTP wrapper around the Pinboard JSON endpoints."""
from __future__ import annotations

from typing import Any
from uuid import UUID

import httpx

PROGRAMMATIC_HEADERS = {
    "X-Requested-With": "XMLHttpRequest",
    "Accept": "application/json",
}


class PinboardClient:
    """Issue authenticated, programmatic requests and hand back raw responses.

    Redirects are not followed so callers can tell a login redirect apart from
    a regular answer.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers=PROGRAMMATIC_HEADERS,
            transport=transport,
            follow_redirects=False,
        )
        self.token = token

    async def __aenter__(self) -> "PinboardClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    async def post(self, path: str, *, json: Any = None) -> httpx.Response:
        return await self._http.post(path, json=json, headers=self._auth_headers())

    async def get(self, path: str, *, params: dict[str, Any] | None = None) -> httpx.Response:
        return await self._http.get(path, params=params, headers=self._auth_headers())

    async def login(self, username: str, password: str) -> httpx.Response:
        """Log in and remember the returned bearer token on success."""

        response = await self._http.post("/login", json={"username": username, "password": password})
        if response.is_success:
            self.token = response.json().get("accessToken")
        return response

    async def toggle_like(self, post_id: str | UUID) -> httpx.Response:
        return await self.post(f"/posts/{post_id}/like")

    async def add_comment(self, post_id: str | UUID, text: str) -> httpx.Response:
        return await self.post(f"/posts/{post_id}/comments", json={"text": text})

    async def toggle_follow(self, user_id: str | UUID) -> httpx.Response:
        return await self.post(f"/users/{user_id}/follow")

    async def feed(self, *, page: int = 1, limit: int | None = None, query: str | None = None) -> httpx.Response:
        params: dict[str, Any] = {"page": page}
        if limit is not None:
            params["limit"] = limit
        if query:
            params["q"] = query
        return await self.get("/feed", params=params)


__all__ = ["PinboardClient", "PROGRAMMATIC_HEADERS"]

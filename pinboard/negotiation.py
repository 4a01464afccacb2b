"""Helpers for answering programmatic callers with JSON and browsers with pages."""
from __future__ import annotations

import json
from typing import Any, Mapping
from urllib.parse import urlencode

from fastapi import Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.datastructures import FormData

from .config import get_settings
from .schemas import CamelModel, ErrorResponse


def wants_json(request: Request) -> bool:
    """Return True when the caller flagged itself as programmatic."""

    if request.headers.get("x-requested-with", "").lower() == "xmlhttprequest":
        return True
    return "application/json" in request.headers.get("accept", "").lower()


async def read_payload(request: Request) -> Mapping[str, Any]:
    """Read a JSON or form-encoded body into a mapping; unreadable bodies are empty."""

    content_type = request.headers.get("content-type", "").lower()
    if "application/json" in content_type:
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return {}
        return body if isinstance(body, dict) else {}

    form: FormData = await request.form()
    return {key: value for key, value in form.items()}


def json_response(model: CamelModel, *, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=model.to_json())


def json_error(message: str, *, status_code: int, headers: Mapping[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=dict(headers) if headers else None,
    )


def redirect(url: str, **params: str) -> RedirectResponse:
    """Redirect with 303 so a POST is followed by a GET."""

    query = {key: value for key, value in params.items() if value}
    target = f"{url}?{urlencode(query)}" if query else url
    return RedirectResponse(url=target, status_code=status.HTTP_303_SEE_OTHER)


def set_session_cookie(response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )


def clear_session_cookie(response) -> None:
    response.delete_cookie(get_settings().session_cookie_name, path="/")


__all__ = [
    "wants_json",
    "read_payload",
    "json_response",
    "json_error",
    "redirect",
    "set_session_cookie",
    "clear_session_cookie",
]

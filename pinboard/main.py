"""Application entry point for the Pinboard web app."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from .config import get_settings
from .database import init_db
from .middleware import ErrorBoundaryMiddleware
from .negotiation import json_error, redirect, wants_json
from .routers import auth_router, feed_router, follows_router, posts_router, profiles_router, system_router
from .ui import render_template

logger = logging.getLogger(__name__)

settings = get_settings()
APP_NAME = settings.app_name
API_VERSION = settings.api_version

app = FastAPI(title=APP_NAME, version=API_VERSION)

if settings.cors_origins:
    origins: Iterable[str] = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
else:
    origins = ["*"]

app.add_middleware(ErrorBoundaryMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(system_router)
app.include_router(auth_router)
app.include_router(feed_router)
app.include_router(posts_router)
app.include_router(follows_router)
app.include_router(profiles_router)


def _error_page(request: Request, status_code: int, message: str) -> Response:
    return render_template(
        request,
        "error.html",
        {"page_title": "Error", "status_code": status_code, "message": message},
        status_code=status_code,
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    message = str(exc.detail)
    if wants_json(request):
        return json_error(message, status_code=exc.status_code, headers=exc.headers)
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        return redirect("/login")
    return _error_page(request, exc.status_code, message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> Response:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in {"body", "path", "query"})
        message = f"Invalid {field}" if field else "Invalid request"
    else:
        message = "Invalid request"
    if wants_json(request):
        return json_error(message, status_code=status.HTTP_400_BAD_REQUEST)
    return _error_page(request, status.HTTP_400_BAD_REQUEST, message)


@app.on_event("startup")
async def _startup() -> None:
    """Ensure the database schema exists before serving."""

    try:
        init_db()
    except Exception:  # pragma: no cover - best effort logging
        logger.exception("Database initialisation failed")
        raise
    logger.info("%s %s ready (storage backend: %s)", APP_NAME, API_VERSION, settings.storage_backend)


def _mount_static(directory: Path, route: str, name: str) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    app.mount(route, StaticFiles(directory=str(directory), check_dir=False), name=name)


UI_STATIC_ROOT = Path(__file__).resolve().parent / "ui" / "static"

_mount_static(Path(settings.media_root), settings.media_url_prefix.rstrip("/") or "/media", "media")
_mount_static(UI_STATIC_ROOT, "/assets", "assets")

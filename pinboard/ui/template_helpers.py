"""Utilities for rendering UI templates with shared context."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from fastapi import Request, status
from fastapi.templating import Jinja2Templates

from ..config import get_settings
from . import components

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

_BASE_COMPONENTS = {
    "cards": components.cards,
    "feedback": components.feedback,
    "layout": components.layout,
}

# Largest unit first; the first non-zero quotient wins.
_TIME_UNITS = (
    ("y", 31536000),
    ("mo", 2592000),
    ("w", 604800),
    ("d", 86400),
    ("h", 3600),
    ("m", 60),
    ("s", 1),
)


def time_ago(value: datetime | None, *, now: datetime | None = None) -> str:
    """Format ``value`` as a compact relative age such as ``5m`` or ``2h``."""

    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    current = now or datetime.now(timezone.utc)
    seconds = int((current - value).total_seconds())
    for suffix, size in _TIME_UNITS:
        amount = seconds // size
        if amount > 0:
            return f"{amount}{suffix}"
    return "just now"


templates.env.filters["time_ago"] = time_ago


def render_template(
    request: Request,
    template_name: str,
    context: dict[str, Any] | None = None,
    *,
    status_code: int = status.HTTP_200_OK,
):
    """Return a TemplateResponse with the shared layout context."""

    base_context: dict[str, Any] = {
        "request": request,
        "app_name": get_settings().app_name,
        "components": _BASE_COMPONENTS,
        "active_nav": None,
        "page_title": "",
        "current_user": None,
    }
    if context:
        base_context.update(context)

    return templates.TemplateResponse(request, template_name, base_context, status_code=status_code)


__all__ = ["render_template", "templates", "time_ago"]

"""Middleware converting unexpected exceptions into a generic 500 response."""
from __future__ import annotations

import logging
from collections.abc import Iterable

from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import HTMLResponse, Response

from ..negotiation import json_error, wants_json

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Server error"

_ERROR_PAGE = """<!doctype html>
<html lang="en">
<head><meta charset="utf-8"><title>Server error</title></head>
<body><h1>Something went wrong</h1><p>Please try again in a moment.</p><a href="/feed">Back to feed</a></body>
</html>"""


class ErrorBoundaryMiddleware(BaseHTTPMiddleware):
    """Log any exception escaping a handler and answer without leaking details."""

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error while serving %s %s", request.method, request.url.path)
            if wants_json(request):
                return json_error(SERVER_ERROR_MESSAGE, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
            return HTMLResponse(_ERROR_PAGE, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


__all__: Iterable[str] = ["ErrorBoundaryMiddleware", "SERVER_ERROR_MESSAGE"]

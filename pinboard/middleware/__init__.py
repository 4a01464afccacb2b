"""Middleware exports."""
from __future__ import annotations

from .error_boundary import ErrorBoundaryMiddleware

__all__ = ["ErrorBoundaryMiddleware"]

"""Expose reusable UI components."""
from __future__ import annotations

from . import cards, feedback, layout

__all__ = [
    "cards",
    "feedback",
    "layout",
]

"""Page/limit parsing and page-count arithmetic shared by list endpoints."""
from __future__ import annotations

import math
from dataclasses import dataclass

# Keeps (page - 1) * limit inside a signed 64-bit OFFSET for any capped limit.
MAX_PAGE = 2**31 - 1


@dataclass(frozen=True, slots=True)
class Pagination:
    current_page: int
    total_pages: int
    has_next_page: bool
    total_posts: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.current_page - 1) * self.limit


def _positive_int(raw: str | int | None, default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def normalize_page_params(
    page: str | int | None,
    limit: str | int | None,
    *,
    default_limit: int,
    max_limit: int,
) -> tuple[int, int]:
    """Return ``(page, limit)`` as positive integers with ``limit`` capped at ``max_limit``.

    Missing, non-numeric or non-positive values fall back to page 1 and
    ``default_limit``; pages beyond ``MAX_PAGE`` are clamped to it.
    """

    normalized_page = min(_positive_int(page, 1), MAX_PAGE)
    normalized_limit = min(_positive_int(limit, default_limit), max_limit)
    return normalized_page, normalized_limit


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    """Compute the pagination envelope for ``total`` rows split into pages of ``limit``."""

    total_pages = math.ceil(total / limit) if limit > 0 else 0
    return Pagination(
        current_page=page,
        total_pages=total_pages,
        has_next_page=page < total_pages,
        total_posts=total,
        limit=limit,
    )


__all__ = ["MAX_PAGE", "Pagination", "normalize_page_params", "build_pagination"]

"""Unit tests for page/limit normalisation and the pagination envelope."""
from __future__ import annotations

import pytest

from pinboard.services.pagination import MAX_PAGE, build_pagination, normalize_page_params


@pytest.mark.parametrize("page", [1, 2, 3, 4])
def test_pages_before_the_last_have_a_next_page(page: int) -> None:
    pagination = build_pagination(page, 20, 95)

    assert pagination.total_pages == 5
    assert pagination.has_next_page is True
    assert pagination.total_posts == 95


def test_last_page_has_no_next_page() -> None:
    pagination = build_pagination(5, 20, 95)

    assert pagination.total_pages == 5
    assert pagination.has_next_page is False
    assert pagination.skip == 80


def test_empty_collection_has_zero_pages() -> None:
    pagination = build_pagination(1, 20, 0)

    assert pagination.total_pages == 0
    assert pagination.has_next_page is False
    assert pagination.skip == 0


@pytest.mark.parametrize(
    ("page", "limit", "expected"),
    [
        (None, None, (1, 20)),
        ("3", "10", (3, 10)),
        ("abc", "xyz", (1, 20)),
        ("0", "-5", (1, 20)),
        ("2", "500", (2, 100)),
        (4, 7, (4, 7)),
    ],
)
def test_normalize_page_params_is_lenient(page, limit, expected) -> None:
    assert normalize_page_params(page, limit, default_limit=20, max_limit=100) == expected


def test_huge_page_numbers_are_clamped() -> None:
    page, limit = normalize_page_params("10000000000000000000", "100", default_limit=20, max_limit=100)

    assert page == MAX_PAGE
    assert build_pagination(page, limit, 5).skip < 2**63

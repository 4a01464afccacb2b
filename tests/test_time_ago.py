"""Tests for the relative timestamp filter used by the templates."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from pinboard.ui.template_helpers import time_ago

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("delta", "expected"),
    [
        (timedelta(seconds=0), "just now"),
        (timedelta(seconds=42), "42s"),
        (timedelta(minutes=5, seconds=10), "5m"),
        (timedelta(hours=2, minutes=59), "2h"),
        (timedelta(days=3), "3d"),
        (timedelta(days=15), "2w"),
        (timedelta(days=65), "2mo"),
        (timedelta(days=800), "2y"),
    ],
)
def test_time_ago_uses_largest_whole_unit(delta: timedelta, expected: str) -> None:
    assert time_ago(NOW - delta, now=NOW) == expected


def test_naive_timestamps_are_treated_as_utc() -> None:
    naive = (NOW - timedelta(hours=1)).replace(tzinfo=None)

    assert time_ago(naive, now=NOW) == "1h"


def test_future_and_missing_values() -> None:
    assert time_ago(NOW + timedelta(minutes=1), now=NOW) == "just now"
    assert time_ago(None) == ""

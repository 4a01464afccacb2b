"""Unit tests for the sliding-window auth throttle."""
from __future__ import annotations

from pinboard.services.rate_limit import SlidingWindowRateLimiter


class _FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_hits_beyond_the_limit_are_rejected_until_the_window_slides() -> None:
    clock = _FakeClock()
    limiter = SlidingWindowRateLimiter(3, 60, clock=clock)

    assert [limiter.hit("1.2.3.4") for _ in range(3)] == [None, None, None]
    retry_after = limiter.hit("1.2.3.4")
    assert retry_after is not None and 1 <= retry_after <= 60

    clock.now += 61
    assert limiter.hit("1.2.3.4") is None


def test_keys_are_throttled_independently() -> None:
    limiter = SlidingWindowRateLimiter(1, 60, clock=_FakeClock())

    assert limiter.hit("a") is None
    assert limiter.hit("b") is None
    assert limiter.hit("a") is not None


def test_reset_clears_history() -> None:
    limiter = SlidingWindowRateLimiter(1, 60, clock=_FakeClock())
    limiter.hit("a")

    limiter.reset()

    assert limiter.hit("a") is None


def test_idle_keys_are_evicted_after_the_window() -> None:
    clock = _FakeClock()
    limiter = SlidingWindowRateLimiter(5, 60, clock=clock)
    for number in range(50):
        limiter.hit(f"10.0.0.{number}")
    assert len(limiter) == 50

    clock.now += 61
    limiter.hit("10.0.1.1")

    assert len(limiter) == 1

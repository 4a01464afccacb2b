"""Tests for the transient toast notifier."""
from __future__ import annotations

import asyncio

from pinboard.client import Toast
from pinboard.client.toast import DEFAULT_DURATION_MS


def test_default_duration() -> None:
    assert Toast().duration_ms == DEFAULT_DURATION_MS == 1600


def test_message_hides_after_duration() -> None:
    async def scenario() -> list[bool]:
        toast = Toast(duration_ms=20)
        toast.show("Saved")
        states = [toast.visible]
        await asyncio.sleep(0.06)
        states.append(toast.visible)
        return states

    assert asyncio.run(scenario()) == [True, False]


def test_new_message_restarts_timer() -> None:
    async def scenario() -> Toast:
        toast = Toast(duration_ms=50)
        toast.show("first")
        await asyncio.sleep(0.03)
        toast.show("second")
        await asyncio.sleep(0.03)
        assert toast.visible and toast.message == "second"
        await asyncio.sleep(0.05)
        return toast

    toast = asyncio.run(scenario())
    assert toast.visible is False
    assert toast.history == ["first", "second"]


def test_without_event_loop_message_stays_until_hidden() -> None:
    toast = Toast()
    toast.show("Offline")

    assert toast.visible is True
    toast.hide()
    assert toast.visible is False

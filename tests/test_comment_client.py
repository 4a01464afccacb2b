"""Tests for the optimistic comment composer."""
from __future__ import annotations

import asyncio

import httpx
import pytest

from pinboard.client import CommentComposer, CommentEntry, CommentThread, MutationOutcome, MutationPhase, Toast

POST_ID = "post-1"


def _composer(send, thread: CommentThread | None = None) -> tuple[CommentComposer, Toast]:
    toast = Toast()
    composer = CommentComposer(
        thread or CommentThread(POST_ID, entries=[CommentEntry(id="c1", text="first")], count=1),
        send,
        toast,
        username="alice",
        clock=lambda: 1700000000.123,
    )
    return composer, toast


def _reply(response: httpx.Response):
    async def send(post_id: str, text: str) -> httpx.Response:
        return response

    return send


def test_whitespace_draft_does_nothing() -> None:
    calls: list[str] = []

    async def send(post_id: str, text: str) -> httpx.Response:
        calls.append(text)
        return httpx.Response(201, json={"success": True})

    composer, toast = _composer(send)

    outcome = asyncio.run(composer.submit("   \n\t"))

    assert outcome is MutationOutcome.SUPPRESSED
    assert calls == []
    assert [entry.id for entry in composer.thread.entries] == ["c1"]
    assert composer.thread.count == 1
    assert toast.history == []


def test_success_replaces_speculative_entry() -> None:
    seen: list[tuple[str, str]] = []
    snapshots: list[list[str]] = []
    composer: CommentComposer

    async def send(post_id: str, text: str) -> httpx.Response:
        seen.append((post_id, text))
        snapshots.append([entry.id for entry in composer.thread.entries])
        return httpx.Response(
            201,
            json={
                "success": True,
                "comment": {"id": "c2", "text": text, "createdAt": "2026-01-01T00:00:00Z", "user": {"username": "alice"}},
            },
        )

    composer, toast = _composer(send)

    outcome = asyncio.run(composer.submit("  nice shot  "))

    assert outcome is MutationOutcome.RECONCILED
    assert seen == [(POST_ID, "nice shot")]
    assert snapshots == [["temp-1700000000123", "c1"]]
    assert [entry.id for entry in composer.thread.entries] == ["c2", "c1"]
    assert composer.thread.entries[0].username == "alice"
    assert composer.thread.count == 2
    assert composer.draft == ""
    assert composer.enabled is True


def test_server_error_removes_entry_and_shows_message() -> None:
    composer, toast = _composer(_reply(httpx.Response(400, json={"error": "Comment text required"})))

    outcome = asyncio.run(composer.submit("hello"))

    assert outcome is MutationOutcome.ROLLED_BACK
    assert [entry.id for entry in composer.thread.entries] == ["c1"]
    assert composer.thread.count == 1
    assert toast.message == "Comment text required"
    assert composer.draft == ""


def test_failure_messages_by_response_shape() -> None:
    cases = [
        (httpx.Response(500, text="oops"), "Failed to post comment"),
        (httpx.Response(200, text="<html></html>"), "Unexpected server response"),
        (httpx.Response(303, headers={"location": "/login"}), "Login required to comment"),
        (httpx.Response(401, json={"error": "Not authenticated"}), "Login required to comment"),
        (httpx.Response(200, json={"success": False}), "Failed to post comment"),
    ]
    for response, expected in cases:
        composer, toast = _composer(_reply(response))

        assert asyncio.run(composer.submit("hi")) is MutationOutcome.ROLLED_BACK
        assert toast.message == expected
        assert composer.thread.count == 1


def test_network_error_rolls_back() -> None:
    async def send(post_id: str, text: str) -> httpx.Response:
        raise httpx.ReadTimeout("timed out")

    composer, toast = _composer(send)

    assert asyncio.run(composer.submit("hi")) is MutationOutcome.ROLLED_BACK
    assert toast.message == "Network error"
    assert [entry.id for entry in composer.thread.entries] == ["c1"]


def test_counter_never_goes_negative() -> None:
    thread = CommentThread(POST_ID, entries=[], count=0)

    async def send(post_id: str, text: str) -> httpx.Response:
        thread.count = 0
        return httpx.Response(500)

    composer, _ = _composer(send, thread)
    asyncio.run(composer.submit("hi"))

    assert thread.count == 0
    assert thread.entries == []


def test_unexpected_error_withdraws_entry_and_returns_to_idle() -> None:
    async def send(post_id: str, text: str) -> httpx.Response:
        raise RuntimeError("renderer crashed")

    composer, toast = _composer(send)

    with pytest.raises(RuntimeError):
        asyncio.run(composer.submit("hello"))

    assert composer.phase is MutationPhase.IDLE
    assert composer.enabled is True
    assert [entry.id for entry in composer.thread.entries] == ["c1"]
    assert composer.thread.count == 1
    assert toast.history == ["Failed to post comment"]

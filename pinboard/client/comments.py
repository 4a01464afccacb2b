"""Optimistic comment composer."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping

import httpx

from .optimistic import NETWORK_ERROR_MESSAGE, MutationOutcome, MutationPhase
from .toast import Toast

logger = logging.getLogger(__name__)

FAILED_MESSAGE = "Failed to post comment"
UNEXPECTED_RESPONSE_MESSAGE = "Unexpected server response"
LOGIN_REQUIRED_MESSAGE = "Login required to comment"


@dataclass
class CommentEntry:
    id: str
    text: str
    username: str | None = None
    created_at: str | None = None
    pending: bool = False

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "CommentEntry":
        author = payload.get("user") or {}
        return cls(
            id=str(payload["id"]),
            text=str(payload.get("text") or ""),
            username=author.get("username"),
            created_at=payload.get("createdAt"),
        )


@dataclass
class CommentThread:
    """Rendered comment list of one post, newest first, plus its counter."""

    post_id: str
    entries: list[CommentEntry] = field(default_factory=list)
    count: int = 0

    def prepend(self, entry: CommentEntry) -> None:
        self.entries.insert(0, entry)

    def replace(self, entry_id: str, entry: CommentEntry) -> None:
        for position, existing in enumerate(self.entries):
            if existing.id == entry_id:
                self.entries[position] = entry
                return
        self.entries.insert(0, entry)

    def remove(self, entry_id: str) -> None:
        self.entries = [entry for entry in self.entries if entry.id != entry_id]


class _CommentRejected(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class CommentComposer:
    """Append a speculative comment, then confirm or withdraw it."""

    def __init__(
        self,
        thread: CommentThread,
        send: Callable[[str, str], Awaitable[httpx.Response]],
        toast: Toast,
        *,
        username: str | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.thread = thread
        self._send = send
        self.toast = toast
        self.username = username
        self._clock = clock
        self.draft = ""
        self.enabled = True
        self.phase = MutationPhase.IDLE

    async def submit(self, draft: str | None = None) -> MutationOutcome:
        if draft is not None:
            self.draft = draft
        text = self.draft.strip()
        if not text or not self.enabled:
            return MutationOutcome.SUPPRESSED

        temp_id = f"temp-{int(self._clock() * 1000)}"
        self.thread.prepend(CommentEntry(id=temp_id, text=text, username=self.username, pending=True))
        self.thread.count += 1
        self.enabled = False
        self.phase = MutationPhase.PENDING

        try:
            response = await self._send(self.thread.post_id, text)
            confirmed = self._confirmed_entry(response)
        except httpx.HTTPError as exc:
            logger.warning("Comment request for post %s failed: %s", self.thread.post_id, exc)
            outcome = self._withdraw(temp_id, NETWORK_ERROR_MESSAGE)
        except _CommentRejected as exc:
            outcome = self._withdraw(temp_id, exc.message)
        except Exception:
            self._withdraw(temp_id, FAILED_MESSAGE)
            raise
        else:
            self.thread.replace(temp_id, confirmed)
            self.phase = MutationPhase.RECONCILED
            outcome = MutationOutcome.RECONCILED
        finally:
            self.enabled = True
            self.draft = ""
            self.phase = MutationPhase.IDLE
        return outcome

    def _withdraw(self, temp_id: str, message: str) -> MutationOutcome:
        self.thread.remove(temp_id)
        self.thread.count = max(0, self.thread.count - 1)
        self.phase = MutationPhase.ROLLED_BACK
        self.toast.show(message)
        return MutationOutcome.ROLLED_BACK

    def _confirmed_entry(self, response: httpx.Response) -> CommentEntry:
        if response.is_redirect or response.status_code == httpx.codes.UNAUTHORIZED:
            raise _CommentRejected(LOGIN_REQUIRED_MESSAGE)

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.is_success:
            message = body.get("error") if isinstance(body, dict) else None
            logger.error("Comment on post %s answered %s", self.thread.post_id, response.status_code)
            raise _CommentRejected(str(message or FAILED_MESSAGE))
        if not isinstance(body, dict):
            raise _CommentRejected(UNEXPECTED_RESPONSE_MESSAGE)
        if not body.get("success") or not isinstance(body.get("comment"), dict):
            raise _CommentRejected(str(body.get("error") or FAILED_MESSAGE))
        return CommentEntry.from_payload(body["comment"])


__all__ = [
    "CommentComposer",
    "CommentEntry",
    "CommentThread",
    "FAILED_MESSAGE",
    "LOGIN_REQUIRED_MESSAGE",
    "UNEXPECTED_RESPONSE_MESSAGE",
]

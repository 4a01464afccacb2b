"""Optimistic toggle mutations (like, follow) with server reconciliation.

A toggle flips the control locally, sends the request and then either adopts
the server's authoritative state or restores the pre-click state. Each
control walks IDLE -> PENDING -> RECONCILED | ROLLED_BACK -> IDLE; a second
trigger while PENDING is dropped without touching the network.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Coroutine

import httpx

from .api import PinboardClient
from .toast import Toast

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error"


class MutationPhase(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    RECONCILED = "reconciled"
    ROLLED_BACK = "rolled_back"


class MutationOutcome(str, Enum):
    RECONCILED = "reconciled"
    ROLLED_BACK = "rolled_back"
    SUPPRESSED = "suppressed"


class DuplicateRequestError(RuntimeError):
    """Raised when a request for an identifier is already in flight."""


class RequestAborted(RuntimeError):
    """Raised when an in-flight request was cancelled on purpose."""


@dataclass
class ToggleControl:
    """UI state for one like or follow button."""

    identifier: str
    active: bool = False
    count: int = 0
    enabled: bool = True
    phase: MutationPhase = MutationPhase.IDLE
    last_outcome: MutationOutcome | None = None
    transitions: list[MutationPhase] = field(default_factory=list)

    def move_to(self, phase: MutationPhase) -> None:
        self.phase = phase
        self.transitions.append(phase)


class PendingRequests:
    """Registry of in-flight requests keyed by target identifier."""

    def __init__(self, *, cancellable: bool = False) -> None:
        self.cancellable = cancellable
        self._tasks: dict[str, asyncio.Task[Any]] = {}
        self._aborted: set[str] = set()

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    async def run(self, identifier: str, request: Coroutine[Any, Any, Any]) -> Any:
        if identifier in self._tasks:
            request.close()
            raise DuplicateRequestError(identifier)

        task = asyncio.ensure_future(request)
        self._tasks[identifier] = task
        try:
            return await task
        except asyncio.CancelledError:
            if identifier in self._aborted:
                raise RequestAborted(identifier) from None
            raise
        finally:
            self._tasks.pop(identifier, None)
            self._aborted.discard(identifier)

    def cancel(self, identifier: str) -> bool:
        """Abort the in-flight request for ``identifier``; only cancellable registries do this."""

        if not self.cancellable:
            return False
        task = self._tasks.get(identifier)
        if task is None or task.done():
            return False
        self._aborted.add(identifier)
        task.cancel()
        return True


@dataclass(frozen=True)
class ToggleConfig:
    """Response keys and user-facing messages for one kind of toggle."""

    flag_key: str
    count_key: str
    login_message: str
    failure_message: str
    fallback_error: str


LIKE_CONFIG = ToggleConfig(
    flag_key="liked",
    count_key="likesCount",
    login_message="Login required to like posts",
    failure_message="Could not update like. Try again.",
    fallback_error="Failed to update like",
)

FOLLOW_CONFIG = ToggleConfig(
    flag_key="following",
    count_key="followersCount",
    login_message="Login required to follow users",
    failure_message="Could not update follow. Try again.",
    fallback_error="Failed to update follow",
)


class OptimisticToggle:
    def __init__(
        self,
        send: Callable[[str], Awaitable[httpx.Response]],
        config: ToggleConfig,
        toast: Toast,
        *,
        cancellable: bool = False,
    ) -> None:
        self._send = send
        self.config = config
        self.toast = toast
        self.pending = PendingRequests(cancellable=cancellable)

    def cancel(self, identifier: str) -> bool:
        return self.pending.cancel(identifier)

    async def _request(self, identifier: str) -> httpx.Response:
        return await self._send(identifier)

    async def toggle(self, control: ToggleControl) -> MutationOutcome:
        """Run one optimistic toggle for ``control`` and report how it settled."""

        if not control.enabled or control.identifier in self.pending:
            control.last_outcome = MutationOutcome.SUPPRESSED
            return MutationOutcome.SUPPRESSED

        previous = (control.active, control.count)
        control.active = not previous[0]
        control.count = previous[1] + 1 if control.active else max(0, previous[1] - 1)
        optimistic_count = control.count
        control.enabled = False
        control.move_to(MutationPhase.PENDING)

        outcome = MutationOutcome.SUPPRESSED
        try:
            response = await self.pending.run(control.identifier, self._request(control.identifier))
        except (DuplicateRequestError, RequestAborted):
            outcome = MutationOutcome.SUPPRESSED
        except httpx.HTTPError as exc:
            logger.warning("Toggle request for %s failed: %s", control.identifier, exc)
            outcome = self._roll_back(control, previous, NETWORK_ERROR_MESSAGE)
        else:
            outcome = self._reconcile(control, previous, optimistic_count, response)
        finally:
            control.enabled = True
            if outcome is MutationOutcome.RECONCILED:
                control.move_to(MutationPhase.RECONCILED)
            elif outcome is MutationOutcome.ROLLED_BACK:
                control.move_to(MutationPhase.ROLLED_BACK)
            control.move_to(MutationPhase.IDLE)
            control.last_outcome = outcome
        return outcome

    def _roll_back(self, control: ToggleControl, previous: tuple[bool, int], message: str) -> MutationOutcome:
        control.active, control.count = previous
        self.toast.show(message)
        return MutationOutcome.ROLLED_BACK

    def _reconcile(
        self,
        control: ToggleControl,
        previous: tuple[bool, int],
        optimistic_count: int,
        response: httpx.Response,
    ) -> MutationOutcome:
        if response.status_code == httpx.codes.UNAUTHORIZED:
            return self._roll_back(control, previous, self.config.login_message)

        if not response.is_success:
            logger.error("Toggle for %s answered %s: %s", control.identifier, response.status_code, response.text[:200])
            return self._roll_back(control, previous, self.config.failure_message)

        try:
            body = response.json()
        except ValueError:
            logger.error("Toggle for %s returned a non-JSON body", control.identifier)
            return self._roll_back(control, previous, self.config.failure_message)
        if not isinstance(body, dict):
            logger.error("Toggle for %s returned an unexpected payload", control.identifier)
            return self._roll_back(control, previous, self.config.failure_message)

        if not body.get("success"):
            return self._roll_back(control, previous, str(body.get("error") or self.config.fallback_error))

        control.active = bool(body.get(self.config.flag_key, control.active))
        server_count = body.get(self.config.count_key)
        control.count = server_count if isinstance(server_count, int) else optimistic_count
        return MutationOutcome.RECONCILED


def like_toggle(client: PinboardClient, toast: Toast) -> OptimisticToggle:
    return OptimisticToggle(client.toggle_like, LIKE_CONFIG, toast, cancellable=True)


def follow_toggle(client: PinboardClient, toast: Toast) -> OptimisticToggle:
    return OptimisticToggle(client.toggle_follow, FOLLOW_CONFIG, toast, cancellable=False)


__all__ = [
    "DuplicateRequestError",
    "FOLLOW_CONFIG",
    "LIKE_CONFIG",
    "MutationOutcome",
    "MutationPhase",
    "OptimisticToggle",
    "PendingRequests",
    "RequestAborted",
    "ToggleControl",
    "ToggleConfig",
    "follow_toggle",
    "like_toggle",
]

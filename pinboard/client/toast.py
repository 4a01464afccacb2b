"""Single-slot transient feedback message."""
from __future__ import annotations

import asyncio

DEFAULT_DURATION_MS = 1600


class Toast:
    """Show one message at a time and hide it after ``duration_ms``.

    The hide timer runs on the active event loop; a new message cancels the
    previous timer. Outside of a running loop the message stays until
    :meth:`hide` is called.
    """

    def __init__(self, *, duration_ms: int = DEFAULT_DURATION_MS) -> None:
        self.duration_ms = duration_ms
        self.message: str | None = None
        self.visible = False
        self.history: list[str] = []
        self._timer: asyncio.TimerHandle | None = None

    def show(self, message: str) -> None:
        self._cancel_timer()
        self.message = message
        self.visible = True
        self.history.append(message)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._timer = loop.call_later(self.duration_ms / 1000, self.hide)

    def hide(self) -> None:
        self._cancel_timer()
        self.visible = False

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


__all__ = ["Toast", "DEFAULT_DURATION_MS"]

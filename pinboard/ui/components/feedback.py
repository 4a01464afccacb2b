"""Feedback elements like toast containers and flash messages."""
from __future__ import annotations

from markupsafe import Markup, escape


def toast_container() -> Markup:
    return Markup(
        """
        <div id=\"toast\" role=\"status\" aria-live=\"polite\" class=\"pointer-events-none fixed inset-x-0 bottom-6 z-50 hidden text-center\"></div>
        """
    )


def flash_message(message: str | None, *, tone: str = "error") -> Markup:
    if not message:
        return Markup("")
    palette = "border-rose-500/40 bg-rose-500/10 text-rose-200" if tone == "error" else "border-emerald-500/40 bg-emerald-500/10 text-emerald-200"
    return Markup(
        f"<p class=\"rounded-2xl border px-4 py-3 text-sm {palette}\" data-role=\"flash\">{escape(message)}</p>"
    )


__all__ = ["toast_container", "flash_message"]

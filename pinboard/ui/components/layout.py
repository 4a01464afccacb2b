"""Layout building blocks shared across pages."""
from __future__ import annotations

from markupsafe import Markup, escape

NAV_LINKS = (
    ("Feed", "/feed"),
    ("My pins", "/allpins"),
    ("Profile", "/profile"),
)


def navbar(*, active: str | None = None, username: str | None = None) -> Markup:
    links_html: list[str] = []
    for label, href in NAV_LINKS:
        text_class = "text-white" if active == href else "text-slate-300"
        links_html.append(
            f"<a href=\"{href}\" class=\"rounded-full px-4 py-2 text-sm font-medium transition hover:text-white {text_class}\">{label}</a>"
        )
    links = "".join(links_html)

    if username:
        account = (
            f"<span class=\"text-xs text-slate-400\">@{escape(username)}</span>"
            "<a href=\"/logout\" class=\"rounded-full border border-slate-700/70 px-4 py-2 text-xs font-semibold text-slate-200 transition hover:border-rose-500 hover:text-rose-300\">Logout</a>"
        )
    else:
        account = "<a href=\"/login\" class=\"rounded-full border border-indigo-500/40 px-4 py-2 text-xs font-semibold text-indigo-300 transition hover:bg-indigo-600/20\">Login</a>"

    return Markup(
        f"""
        <header class=\"sticky top-0 z-40 border-b border-slate-800/60 bg-slate-950/90 backdrop-blur\">
            <div class=\"mx-auto flex max-w-7xl flex-wrap items-center gap-3 px-4 py-4 sm:px-6\">
                <a href=\"/feed\" class=\"flex-1 text-lg font-semibold text-white\">Pinboard</a>
                <form action=\"/feed\" method=\"get\" class=\"flex-1\" role=\"search\">
                    <input type=\"search\" name=\"q\" placeholder=\"Search pins\" class=\"w-full rounded-full bg-slate-900 px-4 py-2 text-sm text-slate-100\">
                </form>
                <nav class=\"flex items-center gap-1\">{links}</nav>
                <div class=\"flex items-center gap-2\">{account}</div>
            </div>
        </header>
        """
    )


__all__ = ["navbar", "NAV_LINKS"]

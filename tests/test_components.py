"""Tests for the markup building blocks shared by every page."""
from __future__ import annotations

from pinboard.ui.components import layout


def test_navbar_highlights_active_link_and_escapes_username() -> None:
    html = str(layout.navbar(active="/allpins", username="<b>eve</b>"))

    assert 'href="/allpins" class="rounded-full px-4 py-2 text-sm font-medium transition hover:text-white text-white"' in html
    assert "@&lt;b&gt;eve&lt;/b&gt;" in html
    assert 'href="/logout"' in html


def test_navbar_offers_login_to_guests() -> None:
    html = str(layout.navbar())

    assert 'href="/login"' in html
    assert 'href="/logout"' not in html


def test_layout_exports_only_rendering_helpers() -> None:
    assert set(layout.__all__) == {"navbar", "NAV_LINKS"}
    assert all(hasattr(layout, name) for name in layout.__all__)

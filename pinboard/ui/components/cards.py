"""Pin cards rendered into the masonry grid."""
from __future__ import annotations

from typing import Any, Mapping

from markupsafe import Markup, escape

DEFAULT_AVATAR = "/assets/img/default-avatar.svg"


def pin_card(post: Mapping[str, Any], *, index: int) -> Markup:
    """Return a grid tile whose data attributes feed the modal gallery."""

    author = post.get("user") or {}
    username = author.get("username") or ""
    avatar = author.get("profile_image") or DEFAULT_AVATAR
    image = post.get("image_url") or ""
    liked = "true" if post.get("liked") else "false"
    return Markup(
        f"""
        <article class=\"pin-card masonry-item\" data-index=\"{index}\" data-post-id=\"{escape(str(post['id']))}\"
            data-image=\"{escape(image)}\" data-title=\"{escape(post.get('title') or '')}\"
            data-description=\"{escape(post.get('description') or '')}\" data-username=\"{escape(username)}\"
            data-user-image=\"{escape(avatar)}\" data-likes=\"{int(post.get('likes_count') or 0)}\"
            data-comments=\"{int(post.get('comments_count') or 0)}\">
            <div class=\"masonry-content\">
                <a href=\"/pin/{escape(str(post['id']))}\"><img src=\"{escape(image)}\" alt=\"{escape(post.get('title') or '')}\" loading=\"lazy\"></a>
                <h3 class=\"mt-2 text-sm font-semibold text-white\">{escape(post.get('title') or '')}</h3>
                <footer class=\"mt-2 flex items-center gap-3 text-xs text-slate-400\">
                    <a href=\"/users/{escape(username)}\">@{escape(username)}</a>
                    <button type=\"button\" class=\"like-btn\" data-post-id=\"{escape(str(post['id']))}\" data-liked=\"{liked}\" aria-pressed=\"{liked}\">
                        <span class=\"like-count\">{int(post.get('likes_count') or 0)}</span>
                    </button>
                    <span class=\"comment-count\">{int(post.get('comments_count') or 0)}</span>
                </footer>
            </div>
        </article>
        """
    )


__all__ = ["pin_card", "DEFAULT_AVATAR"]

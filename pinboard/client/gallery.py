"""Modal gallery over the pins currently rendered on a page."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

DEFAULT_USER_IMAGE = "/assets/img/default-avatar.svg"

WHEEL_THRESHOLD = 30
WHEEL_THROTTLE_SECONDS = 0.4
SWIPE_MIN_DISTANCE = 40
SWIPE_COOLDOWN_SECONDS = 0.25
MIN_ZOOM = 1.0
MAX_ZOOM = 3.0


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class GalleryItem:
    post_id: str
    image: str
    title: str = ""
    description: str = ""
    username: str = ""
    user_image: str | None = None
    likes: int = 0
    comments: int = 0

    @classmethod
    def from_dataset(cls, dataset: Mapping[str, str]) -> "GalleryItem":
        """Build an item from a card's ``data-*`` attributes (camelCased keys)."""

        return cls(
            post_id=dataset.get("postId", ""),
            image=dataset.get("image", ""),
            title=dataset.get("title", ""),
            description=dataset.get("description", ""),
            username=dataset.get("username", ""),
            user_image=dataset.get("userImage") or None,
            likes=_as_int(dataset.get("likes")),
            comments=_as_int(dataset.get("comments")),
        )

    @classmethod
    def from_post(cls, post: Mapping[str, Any]) -> "GalleryItem":
        """Build an item from one entry of the feed JSON ``posts`` list."""

        author = post.get("user") or {}
        return cls(
            post_id=str(post.get("id", "")),
            image=post.get("imageUrl") or "",
            title=post.get("title") or "",
            description=post.get("description") or "",
            username=author.get("username") or "",
            user_image=author.get("profileImage"),
            likes=_as_int(post.get("likesCount")),
            comments=_as_int(post.get("commentsCount")),
        )


@dataclass(frozen=True)
class GalleryDetail:
    image: str
    title: str
    description: str
    author_label: str
    author_image: str
    likes: int
    comments: int

    @classmethod
    def for_item(cls, item: GalleryItem) -> "GalleryDetail":
        return cls(
            image=item.image,
            title=item.title,
            description=item.description,
            author_label=f"@{item.username}" if item.username else "",
            author_image=item.user_image or DEFAULT_USER_IMAGE,
            likes=item.likes,
            comments=item.comments,
        )


class GalleryController:
    """Navigation state for the modal: index, rotation, zoom and input gestures."""

    def __init__(
        self,
        items: Sequence[GalleryItem],
        *,
        populate: Callable[[GalleryDetail], None] | None = None,
        preload: Callable[[str], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.items = list(items)
        self._populate = populate
        self._preload = preload
        self._clock = clock
        self.index = 0
        self.is_open = False
        self.rotation = 0
        self.zoom = MIN_ZOOM
        self.focus_trapped = False
        self._last_wheel: float | None = None
        self._last_swipe: float | None = None
        self._swipe_origin: tuple[float, float] | None = None
        self._pinch_origin: float | None = None

    @property
    def current(self) -> GalleryItem | None:
        if not self.items:
            return None
        return self.items[self.index]

    def _reset_view(self) -> None:
        self.rotation = 0
        self.zoom = MIN_ZOOM
        self._pinch_origin = None

    def _show(self) -> None:
        item = self.current
        if item is not None and self._populate is not None:
            self._populate(GalleryDetail.for_item(item))

    def _preload_at(self, index: int) -> None:
        if self._preload is not None and 0 <= index < len(self.items):
            self._preload(self.items[index].image)

    def open(self, index: int) -> bool:
        if not self.items:
            return False
        self.index = min(max(index, 0), len(self.items) - 1)
        self.is_open = True
        self.focus_trapped = True
        self._reset_view()
        self._show()
        self._preload_at(self.index - 1)
        self._preload_at(self.index + 1)
        return True

    def close(self) -> None:
        self.is_open = False
        self.focus_trapped = False
        self._reset_view()
        self._swipe_origin = None

    def next(self) -> bool:
        if self.index >= len(self.items) - 1:
            return False
        self.index += 1
        self._reset_view()
        self._show()
        self._preload_at(self.index + 1)
        return True

    def previous(self) -> bool:
        if self.index <= 0:
            return False
        self.index -= 1
        self._reset_view()
        self._show()
        self._preload_at(self.index - 1)
        return True

    def rotate(self) -> int:
        self.rotation = (self.rotation + 90) % 360
        return self.rotation

    def select_image(self, url: str) -> bool:
        """Jump to the item showing ``url`` (thumbnail click); opens the modal if needed."""

        for position, item in enumerate(self.items):
            if item.image == url:
                if not self.is_open:
                    return self.open(position)
                if position != self.index:
                    self.index = position
                    self._reset_view()
                    self._show()
                return True
        return False

    def handle_key(self, key: str) -> bool:
        if not self.is_open:
            return False
        if key == "ArrowRight":
            return self.next()
        if key == "ArrowLeft":
            return self.previous()
        if key == "Escape":
            self.close()
            return True
        return False

    def handle_wheel(self, delta_y: float) -> bool:
        if not self.is_open or abs(delta_y) <= WHEEL_THRESHOLD:
            return False
        now = self._clock()
        if self._last_wheel is not None and now - self._last_wheel < WHEEL_THROTTLE_SECONDS:
            return False
        self._last_wheel = now
        return self.next() if delta_y > 0 else self.previous()

    def swipe_start(self, x: float, y: float) -> None:
        self._swipe_origin = (x, y)

    def swipe_end(self, x: float, y: float) -> bool:
        origin, self._swipe_origin = self._swipe_origin, None
        if not self.is_open or origin is None:
            return False
        dx = x - origin[0]
        dy = y - origin[1]
        if abs(dx) <= SWIPE_MIN_DISTANCE or abs(dx) <= abs(dy):
            return False
        now = self._clock()
        if self._last_swipe is not None and now - self._last_swipe < SWIPE_COOLDOWN_SECONDS:
            return False
        self._last_swipe = now
        return self.next() if dx < 0 else self.previous()

    def handle_click(self, x: float, width: float) -> bool:
        if not self.is_open or width <= 0:
            return False
        if x < width / 3:
            return self.previous()
        if x > width * 2 / 3:
            return self.next()
        return False

    def pinch_start(self, distance: float) -> None:
        self._pinch_origin = distance if distance > 0 else None

    def pinch_move(self, distance: float) -> float:
        if self._pinch_origin is None:
            return self.zoom
        self.zoom = min(max(distance / self._pinch_origin, MIN_ZOOM), MAX_ZOOM)
        return self.zoom

    def pinch_end(self) -> None:
        self._pinch_origin = None
        self.zoom = MIN_ZOOM


__all__ = [
    "DEFAULT_USER_IMAGE",
    "GalleryController",
    "GalleryDetail",
    "GalleryItem",
    "MAX_ZOOM",
    "MIN_ZOOM",
]

"""Row-span masonry layout for the pin grid."""
from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass

RESIZE_DEBOUNCE_SECONDS = 0.12
MOUNT_SETTLE_SECONDS = 0.06


def compute_row_span(height: float, row_height: float, row_gap: float) -> int:
    """Number of grid rows a tile of ``height`` pixels occupies; never less than 1."""

    divisor = row_height + row_gap
    if divisor <= 0:
        return 1
    return max(1, math.ceil((height + row_gap) / divisor))


@dataclass
class MasonryItem:
    key: str
    height: float = 0.0
    span: int | None = None


class MasonryGrid:
    def __init__(self, *, row_height: float = 10, row_gap: float = 16) -> None:
        self.row_height = row_height
        self.row_gap = row_gap
        self._items: dict[str, MasonryItem] = {}

    def __len__(self) -> int:
        return len(self._items)

    def add(self, key: str, height: float = 0.0) -> None:
        self._items[key] = MasonryItem(key=key, height=height)

    def remove(self, key: str) -> None:
        self._items.pop(key, None)

    def measure(self, key: str, height: float) -> None:
        item = self._items.get(key)
        if item is None:
            self.add(key, height)
        else:
            item.height = height

    def replace_children(self, heights: dict[str, float]) -> None:
        """Sync the grid with a new child list, keeping spans of surviving items."""

        current = self._items
        self._items = {}
        for key, height in heights.items():
            item = current.get(key) or MasonryItem(key=key)
            item.height = height
            self._items[key] = item

    @property
    def spans(self) -> dict[str, int | None]:
        return {key: item.span for key, item in self._items.items()}

    def layout(self) -> dict[str, int]:
        """Assign spans and return only those that changed."""

        changed: dict[str, int] = {}
        for item in self._items.values():
            span = compute_row_span(item.height, self.row_height, self.row_gap)
            if span != item.span:
                item.span = span
                changed[item.key] = span
        return changed


class MasonryScheduler:
    """Decide when the grid re-lays out: next tick, after a resize pause, or after mount settles."""

    def __init__(
        self,
        grid: MasonryGrid,
        *,
        resize_debounce: float = RESIZE_DEBOUNCE_SECONDS,
        settle_delay: float = MOUNT_SETTLE_SECONDS,
    ) -> None:
        self.grid = grid
        self.resize_debounce = resize_debounce
        self.settle_delay = settle_delay
        self.layout_runs = 0
        self.last_changes: dict[str, int] = {}
        self._tick: asyncio.Handle | None = None
        self._resize: asyncio.TimerHandle | None = None

    def run_layout(self) -> dict[str, int]:
        self._tick = None
        self.layout_runs += 1
        self.last_changes = self.grid.layout()
        return self.last_changes

    def mount(self) -> None:
        asyncio.get_running_loop().call_later(self.settle_delay, self.run_layout)

    def image_loaded(self, key: str, height: float) -> None:
        self.grid.measure(key, height)
        self._schedule_tick()

    def children_changed(self, heights: dict[str, float]) -> None:
        self.grid.replace_children(heights)
        self._schedule_tick()

    def resize(self) -> None:
        if self._resize is not None:
            self._resize.cancel()
        self._resize = asyncio.get_running_loop().call_later(self.resize_debounce, self._after_resize)

    def _after_resize(self) -> None:
        self._resize = None
        self.run_layout()

    def _schedule_tick(self) -> None:
        if self._tick is None:
            self._tick = asyncio.get_running_loop().call_soon(self.run_layout)


__all__ = [
    "MasonryGrid",
    "MasonryItem",
    "MasonryScheduler",
    "compute_row_span",
    "MOUNT_SETTLE_SECONDS",
    "RESIZE_DEBOUNCE_SECONDS",
]

from __future__ import annotations

import bisect
from collections import OrderedDict
from collections.abc import Sequence
from typing import Any, Literal

from .types import ViewportItem, ViewportRange, VisibleItem

Alignment = Literal["start", "center", "end"]
ScrollDirection = Literal["up", "down", "none"]

DEFAULT_ITEM_HEIGHT = 40.0
DEFAULT_OVERSCAN = 5
CACHE_BUCKET = 10
MAX_CACHE_SIZE = 10
HEIGHT_TOLERANCE = 1.0


class ViewportEngine:
    """Virtual-scroll bookkeeping for a list of variable-height rows.

    ``positions[i]`` is the top offset of item ``i`` and ``positions[-1]`` the
    total height. Visible ranges are cached per 10-unit scroll bucket in a
    bounded first-in-first-out cache that every mutation clears.

    ``set_items`` must be called whenever the list identity or order changes;
    mutating the list passed in afterwards leaves ``positions`` stale. The
    engine is not thread-safe.
    """

    def __init__(
        self,
        container_height: float,
        item_height: float | None = None,
        overscan: int | None = None,
        estimated_item_height: float | None = None,
    ) -> None:
        self.container_height = float(container_height)
        self.item_height = float(item_height) if item_height else DEFAULT_ITEM_HEIGHT
        self.overscan = DEFAULT_OVERSCAN if overscan is None else max(0, int(overscan))
        self.estimated_item_height = (
            float(estimated_item_height) if estimated_item_height else self.item_height
        )
        self._items: list[ViewportItem] = []
        self._heights: dict[str, float] = {}
        self._positions: list[float] = [0.0]
        self._last_scroll_top = 0.0
        self._scroll_direction: ScrollDirection = "none"
        self._cache: OrderedDict[int, ViewportRange] = OrderedDict()

    @property
    def scroll_direction(self) -> ScrollDirection:
        return self._scroll_direction

    @property
    def positions(self) -> list[float]:
        return list(self._positions)

    def set_items(self, items: Sequence[ViewportItem]) -> None:
        self._items = list(items)
        self._cache.clear()
        self._recalculate_positions()

    def update_item_height(self, item_id: str, height: float) -> None:
        index = self.get_item_index(item_id)
        declared = self._items[index].height if index is not None else None
        previous = self._height_for_id(item_id, declared)
        self._heights[item_id] = float(height)
        if abs(previous - height) > HEIGHT_TOLERANCE:
            self._cache.clear()
            self._recalculate_positions()

    def set_container_height(self, height: float) -> None:
        self.container_height = float(height)
        self._cache.clear()

    def _height_for_id(self, item_id: str, fallback: float | None = None) -> float:
        measured = self._heights.get(item_id)
        if measured is not None:
            return measured
        if fallback is not None:
            return fallback
        return self.estimated_item_height

    def _height_for(self, item: ViewportItem) -> float:
        return self._height_for_id(item.id, item.height)

    def _recalculate_positions(self) -> None:
        positions = [0.0]
        current = 0.0
        for item in self._items:
            current += self._height_for(item)
            positions.append(current)
        self._positions = positions

    def get_total_height(self) -> float:
        return self._positions[-1]

    def get_item_count(self) -> int:
        return len(self._items)

    def get_item_at_index(self, index: int) -> ViewportItem | None:
        if 0 <= index < len(self._items):
            return self._items[index]
        return None

    def get_item_index(self, item_id: str) -> int | None:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        return None

    def _start_index(self, scroll_top: float) -> int:
        count = len(self._items)
        # last i with positions[i] <= scroll_top, i.e. the row containing it
        index = bisect.bisect_right(self._positions, scroll_top, 0, count) - 1
        return min(max(index, 0), count - 1)

    def get_visible_range(self, scroll_top: float) -> ViewportRange:
        if scroll_top > self._last_scroll_top:
            self._scroll_direction = "down"
        elif scroll_top < self._last_scroll_top:
            self._scroll_direction = "up"
        else:
            self._scroll_direction = "none"
        self._last_scroll_top = scroll_top

        key = int(scroll_top // CACHE_BUCKET) * CACHE_BUCKET
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        count = len(self._items)
        if count == 0:
            return ViewportRange(scroll_top=scroll_top, start_index=0, end_index=0, offset_y=0.0)

        # the cached range is reused for any offset in [key, key + CACHE_BUCKET),
        # so it must cover the window of every such offset
        start_index = max(0, self._start_index(key) - self.overscan)
        bottom = key + CACHE_BUCKET + self.container_height
        last = start_index
        for index in range(start_index, count):
            if self._positions[index] >= bottom:
                break
            last = index
        end_index = min(count - 1, last + self.overscan)

        result = ViewportRange(
            scroll_top=scroll_top,
            start_index=start_index,
            end_index=end_index,
            offset_y=self._positions[start_index],
        )
        if len(self._cache) >= MAX_CACHE_SIZE:
            self._cache.popitem(last=False)
        self._cache[key] = result
        return result

    def get_visible_items(self, scroll_top: float) -> list[VisibleItem]:
        visible_range = self.get_visible_range(scroll_top)
        visible: list[VisibleItem] = []
        for index in range(visible_range.start_index, visible_range.end_index + 1):
            item = self.get_item_at_index(index)
            if item is None:
                continue
            visible.append(
                VisibleItem(
                    item=item,
                    index=index,
                    top=self._positions[index],
                    height=self._positions[index + 1] - self._positions[index],
                )
            )
        return visible

    def scroll_to_item(self, item_id: str, alignment: Alignment = "start") -> float | None:
        """Return the scroll offset that brings ``item_id`` into view, or None."""
        index = self.get_item_index(item_id)
        if index is None:
            return None
        top = self._positions[index]
        height = self._positions[index + 1] - top
        if alignment == "start":
            target = top
        elif alignment == "center":
            target = top - (self.container_height - height) / 2
        elif alignment == "end":
            target = top + height - self.container_height
        else:
            raise ValueError(f"unknown alignment: {alignment!r}")
        return max(0.0, min(target, self.get_total_height() - self.container_height))

    def debug_info(self) -> dict[str, Any]:
        return {
            "items": len(self._items),
            "measured": len(self._heights),
            "total_height": self.get_total_height(),
            "container_height": self.container_height,
            "overscan": self.overscan,
            "cache_size": len(self._cache),
            "scroll_direction": self._scroll_direction,
        }

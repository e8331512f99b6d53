from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Hashable, Sequence

from .lanes import DEFAULT_LANE_SETTINGS, LaneSettings, allocate_lanes, lane_count
from .markers import compute_bounds, generate_time_markers
from .normalize import normalize_items
from .timeline_models import TimelineItem, TimelineLayout

logger = logging.getLogger(__name__)

DEFAULT_PALETTE: tuple[str, ...] = (
    "#3b82f6",  # blue
    "#10b981",  # emerald
    "#a855f7",  # purple
    "#f97316",  # orange
    "#f43f5e",  # rose
    "#06b6d4",  # cyan
    "#f59e0b",  # amber
    "#6366f1",  # indigo
)


def layout_timeline(
    items: Sequence[TimelineItem],
    zoom_level: float = 1.0,
    viewport_width: float | None = None,
    palette: Sequence[str] = DEFAULT_PALETTE,
    settings: LaneSettings = DEFAULT_LANE_SETTINGS,
) -> TimelineLayout:
    """
    Lay out ``items`` on lanes and build the matching time axis.

    Pure: the inputs are never modified and identical inputs give equal
    results. Items come back in chronological start order, not input order.
    """

    if zoom_level <= 0:
        raise ValueError(f"zoom_level must be positive, got {zoom_level}")

    timeline = normalize_items(items, palette)
    processed = tuple(allocate_lanes(timeline, zoom_level, settings))
    markers = generate_time_markers(processed, zoom_level, viewport_width)
    layout = TimelineLayout(
        items=processed,
        markers=markers,
        lane_count=lane_count(processed),
        bounds=compute_bounds(processed),
    )
    logger.debug(
        "laid out %d items on %d lanes (%d month / %d day markers)",
        len(layout.items),
        layout.lane_count,
        len(markers.months),
        len(markers.days),
    )
    return layout


class LayoutCache:
    """
    Caller-owned memo for ``layout_timeline``.

    Entries are keyed by the whole input tuple, so any change to the items,
    zoom level, viewport width, palette or settings recomputes. Least
    recently used entries are evicted beyond ``maxsize``.
    """

    def __init__(self, maxsize: int = 32) -> None:
        if maxsize < 1:
            raise ValueError(f"maxsize must be at least 1, got {maxsize}")
        self.maxsize = maxsize
        self.hits = 0
        self.misses = 0
        self._entries: OrderedDict[Hashable, TimelineLayout] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def layout(
        self,
        items: Sequence[TimelineItem],
        zoom_level: float = 1.0,
        viewport_width: float | None = None,
        palette: Sequence[str] = DEFAULT_PALETTE,
        settings: LaneSettings = DEFAULT_LANE_SETTINGS,
    ) -> TimelineLayout:
        key = (tuple(items), zoom_level, viewport_width, tuple(palette), settings)
        cached = self._entries.get(key)
        if cached is not None:
            self.hits += 1
            self._entries.move_to_end(key)
            return cached

        self.misses += 1
        result = layout_timeline(items, zoom_level, viewport_width, palette, settings)
        self._entries[key] = result
        if len(self._entries) > self.maxsize:
            self._entries.popitem(last=False)
        return result

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from .geometry import (
    ALLOCATION_TEXT_PADDING_PX,
    CHAR_WIDTH_PX,
    REFERENCE_CONTAINER_PX,
    bar_pixel_width,
    text_fits_inside,
)
from .normalize import MS_PER_DAY, elapsed_ms
from .timeline_models import NormalizedItem, NormalizedTimeline, ProcessedItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LaneSettings:
    """
    Tuning knobs for lane allocation.

    The long-label rule (``long_label_chars``, ``preferred_lane_limit``,
    ``lane_budget``) changes visible layout when altered; the defaults
    reproduce the reference timeline.
    """

    overlap_buffer: float = 0.003  # fraction of total span
    minimum_width: float = 0.02
    container_width_px: float = REFERENCE_CONTAINER_PX
    char_width_px: float = CHAR_WIDTH_PX
    text_padding_px: float = ALLOCATION_TEXT_PADDING_PX
    long_label_chars: int = 20
    preferred_lane_limit: int = 3
    lane_budget: int = 10


DEFAULT_LANE_SETTINGS = LaneSettings()


def allocate_lanes(
    timeline: NormalizedTimeline,
    zoom_level: float,
    settings: LaneSettings = DEFAULT_LANE_SETTINGS,
) -> list[ProcessedItem]:
    """
    Assign every normalized item to a lane, keeping the incoming sorted order.

    Greedy interval partitioning: each item takes the lowest lane where it
    clears every occupant by ``overlap_buffer``. Long labels that will not
    fit inside their bar skip the first few lanes while fewer than
    ``lane_budget`` lanes exist, so they may open a new lane. Lane indices
    are contiguous from 0 but not guaranteed minimal.
    """

    if not timeline.items:
        return []

    lanes: list[list[ProcessedItem]] = []
    processed: list[ProcessedItem] = []

    for item in timeline.items:
        duration = max(elapsed_ms(item.start_instant, item.end_instant), MS_PER_DAY)
        position, width = _placement(item, duration, timeline, settings)
        text_will_fit = text_fits_inside(
            bar_pixel_width(width, settings.container_width_px, zoom_level),
            len(item.name) * settings.char_width_px,
            settings.text_padding_px,
        )

        lane = _choose_lane(lanes, position, width, len(item.name), text_will_fit, settings)
        if lane == len(lanes):
            lanes.append([])

        placed = ProcessedItem(
            id=item.id,
            start=item.start,
            end=item.end,
            name=item.name,
            start_instant=item.start_instant,
            end_instant=item.end_instant,
            color=item.color,
            lane=lane,
            duration=duration,
            position=position,
            width=width,
            order=item.order,
        )
        logger.debug(
            "item %s -> lane %d (position=%.4f width=%.4f text_fits=%s)",
            item.id,
            lane,
            position,
            width,
            text_will_fit,
        )
        lanes[lane].append(placed)
        processed.append(placed)

    return processed


def lane_count(items: Iterable[ProcessedItem]) -> int:
    """Number of lanes used; 0 when there are no items."""
    return max((item.lane for item in items), default=-1) + 1


def overlaps(
    position: float,
    width: float,
    other_position: float,
    other_width: float,
    buffer: float = DEFAULT_LANE_SETTINGS.overlap_buffer,
) -> bool:
    """True unless the two intervals are separated by at least ``buffer``."""
    end = position + width
    other_end = other_position + other_width
    return not (position >= other_end + buffer or end + buffer <= other_position)


def _placement(
    item: NormalizedItem,
    duration: float,
    timeline: NormalizedTimeline,
    settings: LaneSettings,
) -> tuple[float, float]:
    if timeline.total_span <= 0 or timeline.min_start is None:
        return 0.0, 1.0
    position = elapsed_ms(timeline.min_start, item.start_instant) / timeline.total_span
    width = max(duration / timeline.total_span, settings.minimum_width)
    # Inverted ranges can start past max_end; DST can make one day exceed the span.
    return min(max(position, 0.0), 1.0), min(width, 1.0)


def _choose_lane(
    lanes: list[list[ProcessedItem]],
    position: float,
    width: float,
    name_length: int,
    text_will_fit: bool,
    settings: LaneSettings,
) -> int:
    for lane_index, occupants in enumerate(lanes):
        if any(
            overlaps(position, width, other.position, other.width, settings.overlap_buffer) for other in occupants
        ):
            continue
        if (
            not text_will_fit
            and name_length > settings.long_label_chars
            and lane_index < settings.preferred_lane_limit
            and len(lanes) < settings.lane_budget
        ):
            continue
        return lane_index
    return len(lanes)

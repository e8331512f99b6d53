from __future__ import annotations

import datetime as _dt
import math

from .normalize import MS_PER_DAY, elapsed_ms
from .timeline_models import ProcessedItem

REFERENCE_CONTAINER_PX = 1200  # assumed container width for text-fit estimates
CHAR_WIDTH_PX = 8
ALLOCATION_TEXT_PADDING_PX = 32
LABEL_TEXT_PADDING_PX = 40
MINIMUM_BAR_WIDTH_PERCENT = 2.0


def bar_pixel_width(normalized_width: float, container_width_px: float, zoom_level: float) -> float:
    """Pixel width of a bar whose width is a fraction of the total span."""
    return normalized_width * container_width_px * zoom_level


def estimated_text_pixels(label: str) -> int:
    return len(label) * CHAR_WIDTH_PX


def text_fits_inside(bar_pixels: float, text_pixels: float, padding: float) -> bool:
    return bar_pixels > text_pixels + padding


def duration_in_days(start: _dt.datetime, end: _dt.datetime) -> int:
    """Whole days between two instants, rounded up. Display only."""
    return math.ceil(elapsed_ms(start, end) / MS_PER_DAY)


def label_fits_inside(item: ProcessedItem, zoom_level: float) -> bool:
    """
    Decide whether a label is drawn inside its bar or beside it.

    Uses the rendered bar width (floored at 2 % of the span) and the wider
    label padding, so an item can pass the allocator's check and still get
    an outside label.
    """

    bar_percent = max(item.width * 100, MINIMUM_BAR_WIDTH_PERCENT)
    bar_pixels = bar_pixel_width(bar_percent / 100, REFERENCE_CONTAINER_PX, zoom_level)
    return text_fits_inside(bar_pixels, estimated_text_pixels(item.name), LABEL_TEXT_PADDING_PX)

from __future__ import annotations

import datetime as _dt
from typing import Iterable, Iterator

from .normalize import at_local_time, elapsed_ms
from .timeline_models import ProcessedItem, TimelineBounds, TimeMarker, TimeMarkersResult

MOBILE_BREAKPOINT_PX = 768
POSITION_TOLERANCE = -0.1  # percent; markers further left are dropped
MARKER_CLOCK = _dt.time(12)  # local noon keeps DST shifts off the date

# (exclusive zoom upper bound, day step), checked in order.
DESKTOP_DAY_STEPS = ((0.7, 14), (1.0, 7), (1.5, 3))
DESKTOP_FINEST_STEP = 1
MOBILE_DAY_STEPS = ((0.8, 14), (1.5, 7), (2.5, 5))
MOBILE_FINEST_STEP = 3
MOBILE_FORCED_WEEKLY = (1.5, 2.0)  # inclusive zoom band that would crowd labels on narrow screens


def compute_bounds(items: Iterable[ProcessedItem]) -> TimelineBounds:
    """Earliest start and latest end across processed items."""
    items = list(items)
    if not items:
        return TimelineBounds()
    min_date = min(item.start_instant for item in items)
    max_date = max(item.end_instant for item in items)
    return TimelineBounds(min_date=min_date, max_date=max_date, total_duration=elapsed_ms(min_date, max_date))


def day_step(zoom_level: float, viewport_width: float | None = None) -> int:
    """
    Days between consecutive day markers.

    Desktop refines down to daily markers as the zoom grows. Narrow viewports
    never go below three days and force weekly markers in the 1.5x-2.0x band.
    """

    if viewport_width is not None and viewport_width < MOBILE_BREAKPOINT_PX:
        low, high = MOBILE_FORCED_WEEKLY
        if low <= zoom_level <= high:
            return 7
        return _step_for(zoom_level, MOBILE_DAY_STEPS, MOBILE_FINEST_STEP)
    return _step_for(zoom_level, DESKTOP_DAY_STEPS, DESKTOP_FINEST_STEP)


def _step_for(zoom_level: float, thresholds: tuple[tuple[float, int], ...], finest: int) -> int:
    for upper, step in thresholds:
        if zoom_level < upper:
            return step
    return finest


def zoom_category(zoom_level: float) -> str:
    """Coarse zoom bucket: ``out``, ``normal`` or ``in``."""
    if zoom_level < 0.75:
        return "out"
    if zoom_level > 1.25:
        return "in"
    return "normal"


def generate_time_markers(
    items: Iterable[ProcessedItem],
    zoom_level: float,
    viewport_width: float | None = None,
) -> TimeMarkersResult:
    """
    Build month-boundary and day markers for the span covered by ``items``.

    Month markers start at the first of the earliest item's month; that
    leading marker is clamped to position 0. Day markers start on the
    earliest item's day and advance by ``day_step``. Markers are placed at
    local noon and positions are percentages clamped to [0, 100].
    """

    bounds = compute_bounds(items)
    if bounds.min_date is None or bounds.max_date is None:
        return TimeMarkersResult()

    first_day = bounds.min_date.date()
    last_day = bounds.max_date.date()

    months: list[TimeMarker] = []
    for idx, day in enumerate(_month_starts(first_day, last_day)):
        marker = _marker(day, bounds, keep_if_before_start=idx == 0)
        if marker is not None:
            months.append(marker)

    step = day_step(zoom_level, viewport_width)
    days: list[TimeMarker] = []
    for day in _day_range(first_day, last_day, step):
        marker = _marker(day, bounds, keep_if_before_start=False)
        if marker is not None:
            days.append(marker)

    return TimeMarkersResult(months=tuple(months), days=tuple(days))


def _marker(day: _dt.date, bounds: TimelineBounds, keep_if_before_start: bool) -> TimeMarker | None:
    if bounds.total_duration <= 0:
        return TimeMarker(date=day, position=0.0)
    instant = at_local_time(day, MARKER_CLOCK)
    raw = elapsed_ms(bounds.min_date, instant) / bounds.total_duration * 100
    if raw < POSITION_TOLERANCE and not keep_if_before_start:
        return None
    return TimeMarker(date=day, position=min(max(raw, 0.0), 100.0))


def _month_starts(first_day: _dt.date, last_day: _dt.date) -> Iterator[_dt.date]:
    current = first_day.replace(day=1)
    while current <= last_day:
        yield current
        current = add_months(current, 1)


def _day_range(first_day: _dt.date, last_day: _dt.date, step: int) -> Iterator[_dt.date]:
    current = first_day
    delta = _dt.timedelta(days=step)
    while current <= last_day:
        yield current
        current += delta


def add_months(day: _dt.date, months: int) -> _dt.date:
    """First day of the month that lies ``months`` calendar months after ``day``'s month."""
    index = day.year * 12 + (day.month - 1) + months
    return _dt.date(index // 12, index % 12 + 1, 1)

from __future__ import annotations

import datetime as _dt
import re
from typing import Sequence

from .timeline_models import NormalizedItem, NormalizedTimeline, TimelineItem

MS_PER_DAY = 86_400_000
_ONE_MS = _dt.timedelta(milliseconds=1)
_ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class ItemValidationError(ValueError):
    """Raised when an item cannot be laid out (bad date string, bad field types)."""


def normalize_items(items: Sequence[TimelineItem], palette: Sequence[str]) -> NormalizedTimeline:
    """
    Parse item dates, sort chronologically and compute the global bounds.

    - Dates become local-midnight instants so no item shifts by a day when
      the host timezone is west of UTC.
    - Sorting is stable on the start instant; ties keep input order and this
      order decides lane priority later on.
    - Colors are assigned round-robin by sorted index.
    - ``total_span`` is in milliseconds and may be zero.
    """

    if not palette:
        raise ValueError("palette must contain at least one style token")
    if not items:
        return NormalizedTimeline()

    parsed = [
        (local_midnight(item.start, f"items[{idx}].start"), local_midnight(item.end, f"items[{idx}].end"), idx, item)
        for idx, item in enumerate(items)
    ]
    parsed.sort(key=lambda entry: entry[0])

    normalized = tuple(
        NormalizedItem(
            id=item.id,
            start=item.start,
            end=item.end,
            name=item.name,
            start_instant=start,
            end_instant=end,
            color=palette[sorted_idx % len(palette)],
            order=input_idx,
        )
        for sorted_idx, (start, end, input_idx, item) in enumerate(parsed)
    )

    min_start = normalized[0].start_instant
    max_end = max(item.end_instant for item in normalized)
    return NormalizedTimeline(
        items=normalized,
        min_start=min_start,
        max_end=max_end,
        total_span=elapsed_ms(min_start, max_end),
    )


def parse_iso_date(value: object, where: str = "date") -> _dt.date:
    """Parse a ``YYYY-MM-DD`` string, raising ItemValidationError otherwise."""
    if isinstance(value, _dt.date) and not isinstance(value, _dt.datetime):
        return value
    if not isinstance(value, str) or not _ISO_DATE.fullmatch(value):
        raise ItemValidationError(f"{where}: expected YYYY-MM-DD string, got {value!r}")
    try:
        return _dt.date.fromisoformat(value)
    except ValueError as exc:
        raise ItemValidationError(f"{where}: expected YYYY-MM-DD string, got {value!r}") from exc


def local_midnight(value: object, where: str = "date") -> _dt.datetime:
    """Return the timezone-aware instant of local midnight on the given day."""
    return at_local_time(parse_iso_date(value, where), _dt.time())


def at_local_time(day: _dt.date, clock: _dt.time) -> _dt.datetime:
    return _dt.datetime.combine(day, clock).astimezone()


def elapsed_ms(start: _dt.datetime, end: _dt.datetime) -> float:
    """Signed milliseconds from ``start`` to ``end``."""
    return (end - start) / _ONE_MS

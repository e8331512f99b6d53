from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass(frozen=True)
class TimelineItem:
    """Caller-supplied event; dates are ``YYYY-MM-DD`` strings."""

    id: int
    start: str
    end: str
    name: str


@dataclass(frozen=True)
class NormalizedItem:
    """
    Timeline item with parsed local-midnight instants and its palette token.

    ``order`` is the index of the item in the caller's input and only serves
    as the stable tie-break for items starting at the same instant.
    """

    id: int
    start: str
    end: str
    name: str
    start_instant: datetime
    end_instant: datetime
    color: str
    order: int = 0


@dataclass(frozen=True)
class ProcessedItem:
    """
    Normalized item placed on a lane.

    ``position`` and ``width`` are fractions of the total span; ``duration``
    is in milliseconds and never shorter than one day.
    """

    id: int
    start: str
    end: str
    name: str
    start_instant: datetime
    end_instant: datetime
    color: str
    lane: int
    duration: float
    position: float
    width: float
    order: int = 0

    @property
    def end_position(self) -> float:
        """Right edge of the bar as a fraction of the total span."""
        return self.position + self.width


@dataclass(frozen=True)
class NormalizedTimeline:
    """Sorted normalized items with the global bounds used for positioning."""

    items: tuple[NormalizedItem, ...] = ()
    min_start: datetime | None = None
    max_end: datetime | None = None
    total_span: float = 0.0


@dataclass(frozen=True)
class TimeMarker:
    """Axis marker; ``position`` is a percentage of the visible span."""

    date: date
    position: float


@dataclass(frozen=True)
class TimeMarkersResult:
    """Month and day markers, each ascending by date."""

    months: tuple[TimeMarker, ...] = ()
    days: tuple[TimeMarker, ...] = ()


@dataclass(frozen=True)
class TimelineBounds:
    """Earliest start, latest end and the span between them in milliseconds."""

    min_date: datetime | None = None
    max_date: datetime | None = None
    total_duration: float = 0.0


@dataclass(frozen=True)
class TimelineLayout:
    """Everything the rendering layer needs for one recomputation."""

    items: tuple[ProcessedItem, ...] = ()
    markers: TimeMarkersResult = field(default_factory=TimeMarkersResult)
    lane_count: int = 0
    bounds: TimelineBounds = field(default_factory=TimelineBounds)

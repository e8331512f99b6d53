from __future__ import annotations

from dataclasses import dataclass, replace

ZOOM_MIN = 0.5
ZOOM_MAX = 4.0
ZOOM_STEP = 1.5
ZOOM_INITIAL = 1.0


@dataclass(frozen=True)
class ZoomState:
    """
    Bounded, multiplicatively stepped zoom level.

    Transitions return a new state; the layout engine only reads ``current``.
    """

    min: float = ZOOM_MIN
    max: float = ZOOM_MAX
    step: float = ZOOM_STEP
    initial: float = ZOOM_INITIAL
    current: float = ZOOM_INITIAL

    def __post_init__(self) -> None:
        if self.min <= 0 or self.max < self.min:
            raise ValueError(f"invalid zoom bounds min={self.min} max={self.max}")
        if self.step <= 1:
            raise ValueError(f"zoom step must be greater than 1, got {self.step}")
        if not self.min <= self.initial <= self.max:
            raise ValueError(f"initial zoom {self.initial} outside [{self.min}, {self.max}]")
        if not self.min <= self.current <= self.max:
            raise ValueError(f"current zoom {self.current} outside [{self.min}, {self.max}]")

    @property
    def can_zoom_in(self) -> bool:
        return self.current < self.max

    @property
    def can_zoom_out(self) -> bool:
        return self.current > self.min

    @property
    def percentage(self) -> str:
        """Display label such as ``150%``."""
        return f"{round(self.current * 100)}%"


def zoom_in(state: ZoomState) -> ZoomState:
    return replace(state, current=min(state.current * state.step, state.max))


def zoom_out(state: ZoomState) -> ZoomState:
    return replace(state, current=max(state.current / state.step, state.min))


def reset(state: ZoomState) -> ZoomState:
    return replace(state, current=state.initial)


def zoom_after(steps: int, state: ZoomState | None = None) -> ZoomState:
    """Apply ``steps`` zoom-ins (or zoom-outs when negative) from the initial level."""
    state = reset(state or ZoomState())
    transition = zoom_in if steps >= 0 else zoom_out
    for _ in range(abs(steps)):
        state = transition(state)
    return state

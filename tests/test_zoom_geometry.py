import datetime as dt

import pytest

from timeline_lanes.engine import layout_timeline
from timeline_lanes.formatters import format_day_month, format_month_year
from timeline_lanes.geometry import (
    bar_pixel_width,
    duration_in_days,
    estimated_text_pixels,
    label_fits_inside,
    text_fits_inside,
)
from timeline_lanes.timeline_models import TimelineItem
from timeline_lanes.zoom import ZoomState, reset, zoom_after, zoom_in, zoom_out


def test_zoom_in_steps_multiplicatively_and_clamps():
    state = ZoomState()
    levels = []
    for _ in range(5):
        state = zoom_in(state)
        levels.append(state.current)

    assert levels == pytest.approx([1.5, 2.25, 3.375, 4.0, 4.0])
    assert not state.can_zoom_in
    assert state.can_zoom_out


def test_zoom_out_clamps_at_minimum():
    state = zoom_out(zoom_out(ZoomState()))

    assert state.current == 0.5
    assert not state.can_zoom_out


def test_reset_returns_initial_level():
    state = reset(zoom_in(ZoomState(initial=2.0, current=2.0)))

    assert state.current == 2.0


def test_transitions_do_not_modify_original_state():
    original = ZoomState()

    zoom_in(original)

    assert original.current == 1.0


def test_zoom_after_applies_signed_steps():
    assert zoom_after(2).current == pytest.approx(2.25)
    assert zoom_after(-1).current == pytest.approx(1 / 1.5)
    assert zoom_after(0).percentage == "100%"
    assert zoom_after(1).percentage == "150%"


@pytest.mark.parametrize(
    "kwargs",
    [{"step": 1.0}, {"min": 0}, {"min": 2.0, "max": 1.0}, {"initial": 5.0}, {"current": 10.0}, {"current": 0.1}],
)
def test_invalid_zoom_configuration_is_rejected(kwargs):
    with pytest.raises(ValueError):
        ZoomState(**kwargs)


def test_bar_pixel_width_scales_with_zoom():
    assert bar_pixel_width(0.5, 1200, 2) == 1200
    assert bar_pixel_width(0.02, 1200, 1) == pytest.approx(24)


def test_text_fit_is_strict():
    assert estimated_text_pixels("abc") == 24
    assert not text_fits_inside(100, 60, 40)
    assert text_fits_inside(101, 60, 40)


def test_duration_in_days_rounds_up():
    start = dt.datetime(2024, 1, 1, tzinfo=dt.timezone.utc)

    assert duration_in_days(start, start + dt.timedelta(days=2)) == 2
    assert duration_in_days(start, start + dt.timedelta(hours=36)) == 2
    assert duration_in_days(start, start) == 0


def test_label_placement_uses_wider_padding_than_allocation():
    items = [
        TimelineItem(id=1, start="2024-01-01", end="2024-01-31", name="Whole month"),
        TimelineItem(id=2, start="2024-01-10", end="2024-01-11", name="A rather long label here"),
    ]

    layout = layout_timeline(items)
    by_id = {item.id: item for item in layout.items}

    assert label_fits_inside(by_id[1], zoom_level=1.0)
    assert not label_fits_inside(by_id[2], zoom_level=1.0)


def test_label_padding_boundary():
    # 10% of 1200 px at 0.97x is about 116 px: room for 80 + 32 but not 80 + 40.
    item = layout_timeline(
        [
            TimelineItem(id=1, start="2024-01-01", end="2024-01-02", name="ABCDEFGHIJ"),
            TimelineItem(id=2, start="2024-01-01", end="2024-01-11", name="Span"),
        ]
    ).items[0]

    assert item.width == pytest.approx(0.1)
    assert text_fits_inside(bar_pixel_width(item.width, 1200, 0.97), 80, 32)
    assert not label_fits_inside(item, zoom_level=0.97)


def test_axis_label_formats():
    assert format_month_year(dt.date(2024, 1, 5)) == "Jan 2024"
    assert format_day_month(dt.date(2024, 1, 15)) == "01/15"

import datetime as dt

import pytest

from timeline_lanes.engine import layout_timeline
from timeline_lanes.markers import add_months, compute_bounds, day_step, generate_time_markers, zoom_category
from timeline_lanes.timeline_models import TimelineItem


def _processed(*ranges):
    items = [TimelineItem(id=i, start=start, end=end, name="E%d" % i) for i, (start, end) in enumerate(ranges, 1)]
    return layout_timeline(items).items


@pytest.mark.parametrize(
    "zoom, expected",
    [(0.5, 14), (0.69, 14), (0.7, 7), (0.99, 7), (1.0, 3), (1.49, 3), (1.5, 1), (4.0, 1)],
)
def test_desktop_day_step(zoom, expected):
    assert day_step(zoom) == expected
    assert day_step(zoom, viewport_width=1280) == expected


@pytest.mark.parametrize(
    "zoom, expected",
    [(0.5, 14), (0.79, 14), (0.8, 7), (1.49, 7), (1.5, 7), (1.8, 7), (2.0, 7), (2.25, 5), (2.5, 3), (4.0, 3)],
)
def test_mobile_day_step(zoom, expected):
    assert day_step(zoom, viewport_width=400) == expected


def test_breakpoint_width_counts_as_desktop():
    assert day_step(1.8, viewport_width=768) == 1
    assert day_step(1.8, viewport_width=767) == 7


def test_month_markers_align_to_first_of_month():
    markers = generate_time_markers(_processed(("2024-01-15", "2024-03-10")), zoom_level=1.0)

    assert [marker.date for marker in markers.months] == [
        dt.date(2024, 1, 1),
        dt.date(2024, 2, 1),
        dt.date(2024, 3, 1),
    ]
    assert markers.months[0].position == 0
    assert 0 < markers.months[1].position < markers.months[2].position < 100


def test_month_markers_cross_year_boundary():
    markers = generate_time_markers(_processed(("2023-11-20", "2024-02-03")), zoom_level=1.0)

    assert [marker.date for marker in markers.months] == [
        dt.date(2023, 11, 1),
        dt.date(2023, 12, 1),
        dt.date(2024, 1, 1),
        dt.date(2024, 2, 1),
    ]


def test_day_markers_follow_day_step():
    items = _processed(("2024-01-01", "2024-01-10"))

    desktop = generate_time_markers(items, zoom_level=1.0)
    mobile = generate_time_markers(items, zoom_level=1.8, viewport_width=400)

    assert [marker.date.day for marker in desktop.days] == [1, 4, 7, 10]
    assert [marker.date.day for marker in mobile.days] == [1, 8]


def test_marker_positions_are_ascending_percentages():
    markers = generate_time_markers(_processed(("2024-01-03", "2024-02-20"), ("2024-01-10", "2024-03-05")), 1.5)

    for series in (markers.months, markers.days):
        positions = [marker.position for marker in series]
        assert positions == sorted(positions)
        assert all(0 <= position <= 100 for position in positions)
        dates = [marker.date for marker in series]
        assert dates == sorted(dates)


def test_day_markers_sit_at_local_noon():
    markers = generate_time_markers(_processed(("2024-01-01", "2024-01-03")), zoom_level=2.0)

    # Two-day span: noon on the first day is a quarter of the way along.
    assert markers.days[0].position == pytest.approx(25.0)
    assert markers.days[1].position == pytest.approx(75.0)


def test_zero_span_places_markers_at_origin():
    markers = generate_time_markers(_processed(("2024-06-01", "2024-06-01")), zoom_level=1.0)

    assert [(marker.date, marker.position) for marker in markers.months] == [(dt.date(2024, 6, 1), 0.0)]
    assert [(marker.date, marker.position) for marker in markers.days] == [(dt.date(2024, 6, 1), 0.0)]


def test_no_items_no_markers():
    markers = generate_time_markers([], zoom_level=1.0)

    assert markers.months == ()
    assert markers.days == ()


def test_compute_bounds_matches_layout_bounds():
    items = _processed(("2024-01-05", "2024-01-07"), ("2024-01-01", "2024-01-31"))

    bounds = compute_bounds(items)

    assert bounds.min_date.date() == dt.date(2024, 1, 1)
    assert bounds.max_date.date() == dt.date(2024, 1, 31)
    assert bounds.total_duration == 30 * 86_400_000


def test_add_months_rolls_over_december():
    assert add_months(dt.date(2023, 12, 1), 1) == dt.date(2024, 1, 1)
    assert add_months(dt.date(2024, 1, 31), 1) == dt.date(2024, 2, 1)


@pytest.mark.parametrize("zoom, expected", [(0.5, "out"), (0.75, "normal"), (1.25, "normal"), (1.5, "in")])
def test_zoom_category(zoom, expected):
    assert zoom_category(zoom) == expected

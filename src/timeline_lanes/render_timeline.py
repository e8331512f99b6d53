from __future__ import annotations

from importlib import metadata
from pathlib import Path

import matplotlib

matplotlib.use("Agg")  # ensure headless, deterministic output
import matplotlib.pyplot as plt
from matplotlib.patches import Patch

from .formatters import format_day_month, format_month_year
from .geometry import MINIMUM_BAR_WIDTH_PERCENT, duration_in_days, label_fits_inside
from .timeline_models import ProcessedItem, TimelineLayout

# Layout tuning knobs (inches / data units).
LANE_HEIGHT_INCH = 0.55
BAR_HEIGHT = 0.62  # fraction of a lane
HEADER_INCH = 1.2
FIG_WIDTH_INCH = 12.0
MAX_FIG_WIDTH_INCH = 48.0
FONT_SCALE = 1.0
TITLE_FONT = 14 * FONT_SCALE
LABEL_FONT = 8 * FONT_SCALE
MONTH_FONT = 9 * FONT_SCALE
DAY_FONT = 7 * FONT_SCALE
FOOTER_FONT = 7 * FONT_SCALE
SUMMARY_FONT = 8 * FONT_SCALE
NARROW_BAR_PERCENT = 15.0  # outside labels for bars narrower than this sit to the right
LEGEND_LIMIT = 12  # swatches listed under the chart
LEGEND_COLUMNS = 4


def render_timeline(
    layout: TimelineLayout,
    out_path: str,
    title: str = "",
    zoom_level: float = 1.0,
) -> None:
    """
    Render a static SVG of a computed layout to ``out_path``.

    - Bars are drawn from ``position``/``width`` only; no layout is recomputed.
    - Labels go inside the bar when they fit, otherwise beside or below it.
    - The zoom level widens the canvas like the scrolling container does.
    """

    if not layout.items:
        raise ValueError("layout has no items to render")

    lanes = max(layout.lane_count, 1)
    fig_width = min(FIG_WIDTH_INCH * zoom_level, MAX_FIG_WIDTH_INCH)
    fig_height = max(3.0, LANE_HEIGHT_INCH * lanes + HEADER_INCH)
    fig, ax = plt.subplots(figsize=(fig_width, fig_height))

    # Percent of span on x, lanes on y (lane 0 on top).
    ax.set_xlim(0, 100)
    ax.set_ylim(-0.5, lanes - 0.5)
    ax.invert_yaxis()
    ax.set_yticks([])
    for side in ("left", "right", "bottom"):
        ax.spines[side].set_visible(False)

    _draw_axis(ax, layout)

    for item in layout.items:
        left = item.position * 100
        width = max(item.width * 100, MINIMUM_BAR_WIDTH_PERCENT)
        y = item.lane
        bars = ax.barh(
            y,
            width=width,
            left=left,
            height=BAR_HEIGHT,
            color=item.color,
            edgecolor="black",
            linewidth=0.5,
            zorder=3,
        )
        bars.patches[0].set_gid(f"item-{item.id}")

        if label_fits_inside(item, zoom_level):
            ax.text(
                left + 0.4,
                y,
                item.name,
                ha="left",
                va="center",
                fontsize=LABEL_FONT,
                color="white",
                clip_on=True,
                zorder=4,
            )
        elif width < NARROW_BAR_PERCENT:
            ax.text(left + width + 0.4, y, item.name, ha="left", va="center", fontsize=LABEL_FONT, zorder=4)
        else:
            ax.text(left + 0.2, y + BAR_HEIGHT / 2, item.name, ha="left", va="top", fontsize=LABEL_FONT, zorder=4)

    _draw_legend(ax, layout)
    fig.suptitle(title, x=0.5, fontsize=TITLE_FONT)
    summary = f"{len(layout.items)} events across {layout.lane_count} lanes"
    if layout.bounds.min_date is not None and layout.bounds.max_date is not None:
        days = duration_in_days(layout.bounds.min_date, layout.bounds.max_date)
        summary += f" • {days} days"
    fig.text(0.01, 0.01, summary, ha="left", va="bottom", fontsize=SUMMARY_FONT, alpha=0.8)
    footer = f"timeline-lanes v{_tool_version()}"
    fig.text(0.99, 0.01, footer, ha="right", va="bottom", fontsize=FOOTER_FONT, alpha=0.8)

    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(out_path, format="svg", bbox_inches="tight")
    plt.close(fig)


def _draw_axis(ax: plt.Axes, layout: TimelineLayout) -> None:
    """Month boundaries as major ticks on top, day markers as grid lines."""

    months = layout.markers.months
    days = layout.markers.days

    ax.xaxis.tick_top()
    ax.set_xticks([marker.position for marker in months])
    ax.set_xticklabels([format_month_year(marker.date) for marker in months], fontsize=MONTH_FONT, ha="left")
    ax.set_xticks([marker.position for marker in days], minor=True)
    ax.set_xticklabels(
        [format_day_month(marker.date) for marker in days],
        minor=True,
        fontsize=DAY_FONT,
        rotation=45,
        ha="left",
    )
    ax.tick_params(axis="x", which="major", pad=14, length=10)
    ax.grid(True, axis="x", which="major", linestyle="-", alpha=0.5)
    ax.grid(True, axis="x", which="minor", linestyle=":", alpha=0.25)


def legend_entries(layout: TimelineLayout) -> list[ProcessedItem]:
    """Items listed in the legend: the first few in chronological order."""
    return list(layout.items[:LEGEND_LIMIT])


def _draw_legend(ax: plt.Axes, layout: TimelineLayout) -> None:
    handles = [
        Patch(facecolor=item.color, edgecolor="black", linewidth=0.5, label=item.name)
        for item in legend_entries(layout)
    ]
    ax.legend(
        handles=handles,
        loc="upper center",
        bbox_to_anchor=(0.5, -0.02),
        ncol=min(LEGEND_COLUMNS, len(handles)),
        fontsize=LABEL_FONT,
        frameon=False,
    )


def _tool_version() -> str:
    try:
        return metadata.version("timeline-lanes")
    except metadata.PackageNotFoundError:
        return "0.0.0"

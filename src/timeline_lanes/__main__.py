from __future__ import annotations

import argparse
import logging
import sys
import webbrowser
from pathlib import Path

import yaml

from .engine import layout_timeline
from .normalize import ItemValidationError
from .parse_items import load_items, load_title
from .render_timeline import render_timeline
from .timeline_models import TimelineItem
from .zoom import ZoomState, zoom_after


def _positive_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number '{value}'") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive number, got {value}")
    return parsed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="timeline-lanes",
        description="Lay out timeline events on lanes and render them as SVG",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("items", help="Path to items YAML or JSON")
    parser.add_argument("--out", default="output/timeline.svg", help="Output SVG path")
    zoom = parser.add_mutually_exclusive_group()
    zoom.add_argument("--zoom", type=_positive_float, help="Explicit zoom level (clamped to the zoom bounds)")
    zoom.add_argument(
        "--zoom-steps",
        type=int,
        default=0,
        help="Zoom in (positive) or out (negative) this many steps from 100%%",
    )
    parser.add_argument("--viewport-width", type=_positive_float, help="Viewport width in pixels; below 768 is mobile")
    parser.add_argument("--title", help="Chart title; defaults to the file's title field")
    parser.add_argument("--verbose", action="store_true", help="Log lane assignments to stderr")
    parser.add_argument(
        "--view",
        dest="view",
        action="store_true",
        default=False,
        help="Best-effort open the output file after rendering",
    )
    parser.add_argument(
        "--no-view",
        dest="view",
        action="store_false",
        help="Do not open the output file after rendering",
    )
    return parser


def _resolve_zoom(args: argparse.Namespace) -> ZoomState:
    if args.zoom is not None:
        bounds = ZoomState()
        return ZoomState(current=min(max(args.zoom, bounds.min), bounds.max))
    return zoom_after(args.zoom_steps)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    items_path = Path(args.items)

    try:
        items: list[TimelineItem] = load_items(str(items_path))
    except (yaml.YAMLError, ItemValidationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except FileNotFoundError:
        print(f"Error: items file not found: {items_path}", file=sys.stderr)
        return 1
    except Exception as exc:  # Unexpected
        print(f"Unexpected error while loading items: {exc}", file=sys.stderr)
        return 1

    if not items:
        print("No timeline items to display")
        return 0

    zoom = _resolve_zoom(args)
    try:
        layout = layout_timeline(items, zoom_level=zoom.current, viewport_width=args.viewport_width)
    except ItemValidationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    title = args.title if args.title is not None else (load_title(str(items_path)) or "")

    try:
        render_timeline(layout, out_path=args.out, title=title, zoom_level=zoom.current)
    except Exception as exc:
        print(f"Unexpected error while rendering: {exc}", file=sys.stderr)
        return 1

    print(f"{len(layout.items)} events across {layout.lane_count} lanes at {zoom.percentage} -> {args.out}")

    if args.view:
        try:
            webbrowser.open(Path(args.out).resolve().as_uri())
        except Exception:
            pass

    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

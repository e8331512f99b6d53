from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from typing import Any

import yaml

from .normalize import ItemValidationError, parse_iso_date
from .timeline_models import TimelineItem

_ITEM_KEYS = {"id", "start", "end", "name"}


@dataclass(frozen=True)
class _Path:
    """Helper to produce readable YAML path strings like items[3].start."""

    parts: tuple[str, ...] = ()

    def child(self, segment: str) -> "_Path":
        return _Path(self.parts + (segment,))

    def __str__(self) -> str:  # pragma: no cover - trivial
        return ".".join(self.parts) if self.parts else "root"


def load_items(path: str) -> list[TimelineItem]:
    """Load timeline items from a YAML or JSON file (no layout)."""

    with open(path, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    return parse_items(raw)


def load_title(path: str) -> str | None:
    """Return the optional top-level ``title`` of an item file."""

    with open(path, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)
    if isinstance(raw, dict) and isinstance(raw.get("title"), str):
        return raw["title"]
    return None


def parse_items(data: Any) -> list[TimelineItem]:
    """
    Validate raw decoded data and build TimelineItem values.

    Accepts either a list of item mappings or a mapping with an ``items``
    list (and an optional ``title``). The whole batch is rejected on the
    first malformed item.
    """

    path = _Path()
    if isinstance(data, dict):
        _assert_allowed_keys(data, {"title", "items"}, path)
        if "items" not in data:
            raise ItemValidationError(f"{path}: missing required field 'items'")
        data = data["items"]
        path = path.child("items")
    elif isinstance(data, list):
        path = path.child("items")
    else:
        raise ItemValidationError(f"{path}: expected a list of items or a mapping with 'items'")

    if not isinstance(data, list):
        raise ItemValidationError(f"{path}: expected list")

    ids: set[int] = set()
    items: list[TimelineItem] = []
    for idx, item_raw in enumerate(data):
        items.append(_parse_item(item_raw, _Path((f"{path}[{idx}]",)), ids))
    return items


def _parse_item(data: Any, path: _Path, ids: set[int]) -> TimelineItem:
    if not isinstance(data, dict):
        raise ItemValidationError(f"{path}: expected mapping for timeline item")

    _assert_allowed_keys(data, _ITEM_KEYS, path)
    item_id = _require_id(data, path, ids)
    name = _require_str(data, "name", path)
    start = _require_date(data, "start", path)
    end = _require_date(data, "end", path)
    return TimelineItem(id=item_id, start=start, end=end, name=name)


def _assert_allowed_keys(data: dict[str, Any], allowed: set[str], path: _Path) -> None:
    extras = sorted(str(key) for key in set(data.keys()) - allowed)
    if extras:
        raise ItemValidationError(f"{path}: unexpected fields {extras}")


def _require_value(data: dict[str, Any], key: str, path: _Path) -> Any:
    if key not in data:
        raise ItemValidationError(f"{path}: missing required field '{key}'")
    return data[key]


def _require_str(data: dict[str, Any], key: str, path: _Path) -> str:
    value = _require_value(data, key, path)
    if not isinstance(value, str) or not value.strip():
        raise ItemValidationError(f"{path.child(key)}: expected non-empty string")
    return value


def _require_id(data: dict[str, Any], path: _Path, ids: set[int]) -> int:
    value = _require_value(data, "id", path)
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ItemValidationError(f"{path.child('id')}: expected integer")
    if value in ids:
        raise ItemValidationError(f"{path.child('id')}: duplicate id {value}")
    ids.add(value)
    return value


def _require_date(data: dict[str, Any], key: str, path: _Path) -> str:
    value = _require_value(data, key, path)
    # Unquoted YAML dates arrive already decoded.
    if isinstance(value, _dt.date) and not isinstance(value, _dt.datetime):
        return value.isoformat()
    return parse_iso_date(value, str(path.child(key))).isoformat()

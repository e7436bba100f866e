"""Derived view computation: filter and sort a loaded collection.

Everything here is a pure function of ``(items, criteria, descriptor)``.
Nothing is cached; callers recompute on every render.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Callable

from listing_core.errors import ValidationError
from listing_core.formatting import parse_date
from listing_core.models import FilterCriteria, RangeFilter
from listing_core.resources.base import MISSING, ResourceDescriptor, SortOption, get_path


def _as_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().replace(",", "").lstrip("₹$").rstrip("%").lstrip("+")
    try:
        return float(text)
    except ValueError:
        return None


def _comparable(value: Any, kind: str) -> Any:
    if kind == "number":
        return _as_number(value)
    if kind == "date":
        return parse_date(value)
    if value is None:
        return None
    return str(value).lower()


def _range_kind(flt: RangeFilter) -> str:
    for bound in (flt.low, flt.high):
        if bound is None:
            continue
        if isinstance(bound, datetime):
            return "date"
        if _as_number(bound) is not None:
            return "number"
        if parse_date(bound) is not None:
            return "date"
        raise ValidationError(f"invalid bound for {flt.field}: {bound}", {flt.field: "expected a number or date"})
    return "number"


def matches_search(item: dict, text: str, fields: tuple[str, ...]) -> bool:
    needle = text.strip().lower()
    if not needle:
        return True
    for path in fields:
        value = get_path(item, path)
        if value is not None and needle in str(value).lower():
            return True
    return False


def _is_date_only(bound: Any) -> bool:
    if isinstance(bound, datetime):
        return False
    return ":" not in str(bound)


def _upper_bound(bound: Any, kind: str) -> Any:
    high = _comparable(bound, kind)
    if kind == "date" and high is not None and _is_date_only(bound):
        # a bare day covers the whole day
        return high + timedelta(days=1) - timedelta(microseconds=1)
    return high


def matches_range(item: dict, flt: RangeFilter, kind: str) -> bool:
    value = _comparable(get_path(item, flt.field), kind)
    if value is None:
        return False
    low = _comparable(flt.low, kind)
    high = _upper_bound(flt.high, kind)
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def _active_categoricals(criteria: FilterCriteria, descriptor: ResourceDescriptor) -> list[tuple[str, Any, Callable]]:
    active: list[tuple[str, Any, Callable]] = []
    for name, label in criteria.categorical.items():
        flt = descriptor.filter_named(name)
        value = flt.resolve(label)
        if value is not MISSING:
            active.append((flt.field, value, flt.matcher or _matches_value))
    return active


def _matches_value(actual: Any, expected: Any) -> bool:
    if isinstance(expected, bool):
        return bool(actual) is expected
    if isinstance(expected, str):
        return actual is not None and str(actual).lower() == expected.lower()
    return actual == expected


def sort_rows(rows: list[dict], option: SortOption) -> list[dict]:
    keyed = [(_comparable(get_path(row, option.field), option.kind), row) for row in rows]
    present = [pair for pair in keyed if pair[0] is not None]
    missing = [row for value, row in keyed if value is None]
    # sorted() is stable in both directions, so ties keep collection order.
    present.sort(key=lambda pair: pair[0], reverse=option.descending)
    return [row for _, row in present] + missing


def compute_view(items: list[dict], criteria: FilterCriteria, descriptor: ResourceDescriptor) -> list[dict]:
    categoricals = _active_categoricals(criteria, descriptor)
    ranges = [(flt, _range_kind(flt)) for flt in criteria.ranges]
    sort_option = descriptor.sort_named(criteria.sort) if criteria.sort else None

    rows = [
        item
        for item in items
        if matches_search(item, criteria.search_text, descriptor.search_fields)
        and all(match(get_path(item, field), value) for field, value, match in categoricals)
        and all(matches_range(item, flt, kind) for flt, kind in ranges)
    ]

    if sort_option is not None:
        rows = sort_rows(rows, sort_option)
    return rows


def summarize(items: list[dict], descriptor: ResourceDescriptor) -> dict[str, Any]:
    if descriptor.summarize is None:
        return {"total": len(items)}
    return descriptor.summarize(items)


def parse_range(text: str) -> RangeFilter:
    """Parse ``field:low:high`` as typed on the command line; either bound may be blank."""
    parts = text.split(":")
    if len(parts) != 3 or not parts[0].strip():
        raise ValidationError(f"invalid range: {text}", {"range": "expected field:low:high"})
    field, low, high = (p.strip() for p in parts)
    return RangeFilter(field=field, low=low or None, high=high or None)

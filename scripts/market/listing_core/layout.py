"""Responsive layout selection by terminal width."""

from __future__ import annotations

from listing_core.resources.base import Column

MAX_COLUMNS = {"narrow": 4, "medium": 6}


def select_layout_mode(width: int) -> str:
    if width < 100:
        return "narrow"
    if width < 160:
        return "medium"
    return "wide"


def visible_columns(columns: tuple[Column, ...], width: int, pinned: str | None = None) -> list[Column]:
    """Drop trailing columns on small terminals, always keeping the status column."""
    mode = select_layout_mode(width)
    limit = MAX_COLUMNS.get(mode)
    if limit is None or len(columns) <= limit:
        return list(columns)

    shown = list(columns[:limit])
    if pinned and all(c.field != pinned for c in shown):
        extra = next((c for c in columns if c.field == pinned), None)
        if extra is not None:
            shown[-1] = extra
    return shown

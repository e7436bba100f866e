"""Shared model contracts for list screens."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

MUTATION_KINDS = ("create", "update", "delete")


class LoadState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERRORED = "errored"


@dataclass
class RangeFilter:
    field: str
    low: Any = None
    high: Any = None


@dataclass
class FilterCriteria:
    search_text: str = ""
    categorical: dict[str, str] = field(default_factory=dict)
    ranges: list[RangeFilter] = field(default_factory=list)
    sort: str | None = None

    def is_empty(self) -> bool:
        return not (self.search_text.strip() or self.categorical or self.ranges or self.sort)


@dataclass(frozen=True)
class MutationIntent:
    kind: str
    item_id: str | None = None
    fields: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.kind not in MUTATION_KINDS:
            raise ValueError(f"unknown mutation kind: {self.kind}")
        if self.kind != "create" and not self.item_id:
            raise ValueError(f"{self.kind} requires an item id")


@dataclass
class ScreenData:
    key: str
    title: str
    status: str = "ok"
    items: list[dict[str, Any]] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "title": self.title,
            "status": self.status,
            "items": self.items,
            "meta": self.meta,
            "errors": self.errors,
        }

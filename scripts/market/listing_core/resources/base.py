"""Resource descriptor contracts.

A descriptor tells the generic list machinery everything that differs
between screens: where the collection lives, how a raw API row becomes a
Collection Item, which fields are searched, filtered, sorted and exported,
and how writes are sent back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from listing_core.errors import ValidationError
from listing_core.session import SessionContext

MISSING = object()


def get_path(item: dict, path: str, default: Any = None) -> Any:
    """Resolve a dotted path (``customer.name``) against nested dicts."""
    value: Any = item
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return default
        value = value[part]
    return value


@dataclass(frozen=True)
class CategoricalFilter:
    name: str
    field: str
    # label -> value; ``None`` means the label itself is the value.
    options: dict[str, Any] | None = None
    all_label: str = "All"
    # (item value, resolved value) -> bool; exact match when unset
    matcher: Callable[[Any, Any], bool] | None = None

    def labels(self) -> list[str]:
        return [self.all_label, *(self.options or {})]

    def resolve(self, label: str | None) -> Any:
        """Return the value to match, or MISSING when the filter is inactive."""
        if label is None:
            return MISSING
        text = str(label).strip()
        if not text or text.lower() == self.all_label.lower() or text.lower() == "all":
            return MISSING
        if self.options is None:
            return text
        for option, value in self.options.items():
            if option.lower() == text.lower():
                return value
        raise ValidationError(
            f"unknown {self.name} option: {label}",
            {self.name: f"expected one of: {', '.join(self.labels())}"},
        )


@dataclass(frozen=True)
class SortOption:
    label: str
    field: str
    descending: bool = False
    kind: str = "text"  # text | number | date


@dataclass(frozen=True)
class Column:
    header: str
    field: str
    formatter: Callable[[Any], str] | None = None

    def render(self, item: dict) -> str:
        value = get_path(item, self.field)
        if self.formatter is not None:
            return self.formatter(value)
        if value is None:
            return ""
        if isinstance(value, bool):
            return "Yes" if value else "No"
        return str(value)


def _identity(row: dict) -> dict:
    return dict(row)


@dataclass(frozen=True)
class ResourceDescriptor:
    key: str
    title: str
    path: str
    list_key: str
    columns: tuple[Column, ...]
    search_fields: tuple[str, ...] = ()
    filters: tuple[CategoricalFilter, ...] = ()
    sorts: tuple[SortOption, ...] = ()
    normalize: Callable[[dict], dict] = _identity
    scope_params: dict[str, str] = field(default_factory=dict)
    # role -> {query param: session attribute}; admins see everything unscoped
    role_scopes: dict[str, dict[str, str]] = field(default_factory=dict)
    requires_session: bool = False
    item_keys: tuple[str, ...] = ()
    defaults: Callable[[dict], dict] | None = None
    required_fields: tuple[str, ...] = ()
    numeric_fields: tuple[str, ...] = ()
    # normalized field -> raw response keys it is derived from; defaults to its own name
    field_sources: dict[str, tuple[str, ...]] = field(default_factory=dict)
    writable: tuple[str, ...] = ("create", "update", "delete")
    # "remote" sends writes to the API; "local" only patches the loaded collection
    write_mode: str = "remote"
    write_method: str = "PUT"
    id_field: str | None = None
    delete_param: str = "id"
    refetch_after_write: bool = False
    status_field: str | None = "status"
    summarize: Callable[[list[dict]], dict[str, Any]] | None = None

    def filter_named(self, name: str) -> CategoricalFilter:
        for flt in self.filters:
            if flt.name.lower() == name.lower():
                return flt
        known = ", ".join(f.name for f in self.filters) or "none"
        raise ValidationError(f"unknown filter for {self.key}: {name}", {name: f"known filters: {known}"})

    def sort_named(self, label: str) -> SortOption:
        for option in self.sorts:
            if option.label.lower() == label.lower():
                return option
        known = ", ".join(s.label for s in self.sorts) or "none"
        raise ValidationError(f"unknown sort for {self.key}: {label}", {"sort": f"known sorts: {known}"})

    def query_params(self, session: SessionContext | None) -> dict[str, str]:
        params = dict(self.scope_params)
        if session is None:
            if self.requires_session:
                raise ValidationError(f"{self.key} needs a signed-in user", {"session": "required"})
            return params
        for param, attr in self.role_scopes.get(session.role, {}).items():
            params[param] = str(getattr(session, attr))
        return params

    def server_fields(self, raw: dict) -> dict:
        """Normalize a write response, keeping only the fields it actually carried.

        Write endpoints often answer with a bare record (no joined relations),
        and the normalizer would fill the gaps with defaults.
        """
        normalized = self.normalize(raw)
        return {
            key: value
            for key, value in normalized.items()
            if any(source in raw for source in self.field_sources.get(key, (key,)))
        }

    def new_item(self, fields: dict) -> dict:
        base = self.defaults(fields) if self.defaults is not None else {}
        base.update(fields)
        return base

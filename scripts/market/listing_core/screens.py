"""List screens: one loaded collection, its filter criteria and its mutations."""

from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Callable

from listing_core.client import ApiClient, item_from_envelope
from listing_core.errors import ItemNotFoundError, ListingError, ValidationError
from listing_core.export import write_csv
from listing_core.loader import CancelToken, CollectionLoader
from listing_core.models import FilterCriteria, LoadState, MutationIntent, RangeFilter, ScreenData
from listing_core.mutations import MutationApplier, is_temporary
from listing_core.resources.base import ResourceDescriptor
from listing_core.session import SessionContext
from listing_core.validation import validate
from listing_core.view import compute_view, summarize

logger = logging.getLogger(__name__)


class ListScreen:
    def __init__(self, descriptor: ResourceDescriptor, client: ApiClient, session: SessionContext | None = None):
        self.descriptor = descriptor
        self.client = client
        self.session = session
        self.loader = CollectionLoader(descriptor, client, session)
        self.mutations = MutationApplier(self.loader.items)
        self.criteria = FilterCriteria()
        self.token = CancelToken()

    @property
    def items(self) -> list[dict]:
        return self.loader.items

    @property
    def state(self) -> LoadState:
        return self.loader.state

    @property
    def error(self) -> str | None:
        return self.loader.error

    def mount(self) -> bool:
        if self.loader.state is LoadState.IDLE:
            return self.refresh()
        return self.loader.state is LoadState.LOADED

    def refresh(self) -> bool:
        loaded = self.loader.load(self.token)
        if loaded:
            self.mutations.rebind(self.loader.items)
        return loaded

    def close(self) -> None:
        self.token.cancel()

    # filter criteria

    def set_search(self, text: str) -> None:
        self.criteria.search_text = text or ""

    def set_filter(self, name: str, label: str) -> None:
        flt = self.descriptor.filter_named(name)
        flt.resolve(label)
        self.criteria.categorical[flt.name] = label

    def add_range(self, field: str, low: Any = None, high: Any = None) -> None:
        self.criteria.ranges.append(RangeFilter(field=field, low=low, high=high))

    def set_sort(self, label: str | None) -> None:
        if label:
            self.descriptor.sort_named(label)
        self.criteria.sort = label or None

    def reset_filters(self) -> None:
        self.criteria = FilterCriteria()

    def visible_rows(self) -> list[dict]:
        return compute_view(self.loader.items, self.criteria, self.descriptor)

    def stats(self) -> dict[str, Any]:
        return summarize(self.loader.items, self.descriptor)

    def export_csv(self, target: str | Path | None = None) -> Path:
        return write_csv(self.visible_rows(), self.descriptor, target)

    # mutations

    def _ensure_writable(self, kind: str) -> None:
        if kind not in self.descriptor.writable:
            raise ValidationError(f"{self.descriptor.key} does not support {kind}", {"action": "not allowed"})

    def _ensure_present(self, item_id: str) -> None:
        if not any(str(item.get("id")) == str(item_id) for item in self.loader.items):
            raise ItemNotFoundError(self.descriptor.key, item_id)
        if is_temporary(item_id) and self.descriptor.write_mode != "local":
            raise ValidationError(f"{item_id} has not been saved yet; refresh first", {"id": "unsaved"})

    def _server_item(self, payload: dict) -> dict | None:
        raw = item_from_envelope(payload, self.descriptor.item_keys)
        if raw is None:
            return None
        return self.descriptor.server_fields(raw)

    def _settle(self, mutation_id: str, payload: dict) -> dict | None:
        if self.descriptor.refetch_after_write:
            self.mutations.confirm(mutation_id)
            self.refresh()
            return None
        return self.mutations.confirm(mutation_id, self._server_item(payload))

    def _send(self, mutation_id: str, write: Callable[[], dict]) -> dict | None:
        if self.descriptor.write_mode == "local":
            self.mutations.confirm(mutation_id)
            return None
        try:
            payload = write()
        except ListingError:
            self.mutations.rollback(mutation_id)
            raise
        return self._settle(mutation_id, payload)

    def create(self, fields: dict) -> dict:
        self._ensure_writable("create")
        validate(fields, self.descriptor)
        mutation = self.mutations.create(self.descriptor.new_item(fields))
        merged = self._send(mutation.mutation_id, lambda: self.client.create(self.descriptor.path, fields))
        logger.info("created %s %s", self.descriptor.key, mutation.item_id)
        return merged or self._find(mutation.item_id) or {}

    def update(self, item_id: str, patch: dict) -> dict:
        self._ensure_writable("update")
        self._ensure_present(item_id)
        validate(patch, self.descriptor, partial=True)
        mutation = self.mutations.update(item_id, patch)
        merged = self._send(
            mutation.mutation_id,
            lambda: self.client.update(
                self.descriptor.path,
                item_id,
                patch,
                method=self.descriptor.write_method,
                id_field=self.descriptor.id_field,
            ),
        )
        logger.info("updated %s %s", self.descriptor.key, item_id)
        return merged or self._find(item_id) or {}

    def delete(self, item_id: str) -> None:
        self._ensure_writable("delete")
        self._ensure_present(item_id)
        mutation = self.mutations.delete(item_id)
        self._send(
            mutation.mutation_id,
            lambda: self.client.delete(self.descriptor.path, item_id, self.descriptor.delete_param),
        )
        logger.info("deleted %s %s", self.descriptor.key, item_id)

    def apply(self, intent: MutationIntent) -> dict | None:
        if intent.kind == "create":
            return self.create(dict(intent.fields))
        if intent.kind == "update":
            return self.update(str(intent.item_id), dict(intent.fields))
        self.delete(str(intent.item_id))
        return None

    def _find(self, item_id: str) -> dict | None:
        for item in self.loader.items:
            if str(item.get("id")) == str(item_id):
                return item
        return None

    # rendering contract

    def _status(self) -> str:
        if self.loader.state is LoadState.ERRORED:
            return "warn" if self.loader.loaded_once else "error"
        if self.loader.warnings:
            return "warn"
        return "ok"

    def to_screen_data(self) -> ScreenData:
        rows = self.visible_rows()
        errors = [self.loader.error] if self.loader.error else []
        errors.extend(self.loader.warnings)
        return ScreenData(
            key=self.descriptor.key,
            title=self.descriptor.title,
            status=self._status(),
            items=rows,
            meta={
                "total": len(self.loader.items),
                "shown": len(rows),
                "state": self.loader.state.value,
                "stats": self.stats(),
                "criteria": asdict(self.criteria),
                "pending": len(self.mutations.pending),
            },
            errors=errors,
        )

"""Optimistic local mutation of a loaded collection.

Each create/update/delete is applied to the in-memory collection at once and
recorded as a pending mutation holding enough of a snapshot to undo it. The
caller confirms the mutation once the server agrees, or rolls it back when
the write fails.
"""

from __future__ import annotations

import copy
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from listing_core.models import MutationIntent

logger = logging.getLogger(__name__)

PENDING = "pending"
CONFIRMED = "confirmed"
ROLLED_BACK = "rolled_back"

_SEQ = itertools.count(1)


def temporary_id() -> str:
    return f"tmp-{time.time_ns()}-{next(_SEQ)}"


def is_temporary(item_id: str | None) -> bool:
    return bool(item_id) and str(item_id).startswith("tmp-")


@dataclass
class PendingMutation:
    mutation_id: str
    intent: MutationIntent
    item_id: str
    snapshot: dict[str, Any] | None = None
    index: int | None = None
    status: str = PENDING
    created_at: float = field(default_factory=time.time)


class MutationApplier:
    """Applies mutations to ``items`` in place; the list object is shared with its owner."""

    def __init__(self, items: list[dict], id_factory: Callable[[], str] = temporary_id):
        self.items = items
        self.id_factory = id_factory
        self.pending: dict[str, PendingMutation] = {}

    def _index_of(self, item_id: str) -> int | None:
        for index, item in enumerate(self.items):
            if str(item.get("id")) == str(item_id):
                return index
        return None

    def _record(self, intent: MutationIntent, item_id: str, snapshot: dict | None, index: int | None) -> PendingMutation:
        mutation = PendingMutation(
            mutation_id=f"m{next(_SEQ)}",
            intent=intent,
            item_id=item_id,
            snapshot=snapshot,
            index=index,
        )
        self.pending[mutation.mutation_id] = mutation
        return mutation

    def rebind(self, items: list[dict]) -> None:
        """Point at a freshly loaded collection; outstanding snapshots stay valid."""
        self.items = items

    def create(self, item: dict) -> PendingMutation:
        record = dict(item)
        record["id"] = self.id_factory()
        self.items.append(record)
        return self._record(MutationIntent("create", fields=dict(item)), record["id"], None, None)

    def update(self, item_id: str, patch: dict) -> PendingMutation | None:
        index = self._index_of(item_id)
        if index is None:
            logger.debug("update skipped, no item %s", item_id)
            return None
        current = self.items[index]
        snapshot = copy.deepcopy(current)
        updated = dict(current)
        updated.update(patch)
        updated["id"] = current.get("id")
        self.items[index] = updated
        return self._record(MutationIntent("update", str(item_id), dict(patch)), str(item_id), snapshot, index)

    def delete(self, item_id: str) -> PendingMutation | None:
        index = self._index_of(item_id)
        if index is None:
            logger.debug("delete skipped, no item %s", item_id)
            return None
        removed = self.items.pop(index)
        return self._record(MutationIntent("delete", str(item_id)), str(item_id), removed, index)

    def confirm(self, mutation_id: str, server_item: dict | None = None) -> dict | None:
        mutation = self.pending.pop(mutation_id)
        mutation.status = CONFIRMED
        if server_item is None or mutation.intent.kind == "delete":
            return None

        index = self._index_of(mutation.item_id)
        if index is None:
            return None
        merged = dict(self.items[index])
        merged.update(server_item)
        if not merged.get("id"):
            merged["id"] = mutation.item_id
        self.items[index] = merged
        mutation.item_id = str(merged["id"])
        return merged

    def rollback(self, mutation_id: str) -> None:
        mutation = self.pending.pop(mutation_id)
        mutation.status = ROLLED_BACK
        kind = mutation.intent.kind
        logger.warning("rolling back %s of %s", kind, mutation.item_id)

        if kind == "create":
            index = self._index_of(mutation.item_id)
            if index is not None:
                self.items.pop(index)
        elif kind == "update":
            index = self._index_of(mutation.item_id)
            if index is not None and mutation.snapshot is not None:
                self.items[index] = mutation.snapshot
        elif kind == "delete" and mutation.snapshot is not None:
            if self._index_of(mutation.item_id) is None:
                position = min(mutation.index or 0, len(self.items))
                self.items.insert(position, mutation.snapshot)

    def has_pending(self) -> bool:
        return bool(self.pending)

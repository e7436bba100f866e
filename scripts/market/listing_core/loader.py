"""Remote collection loading with a cancellable lifetime."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future

from listing_core.client import ApiClient
from listing_core.errors import ApplicationError, ListingError, TransportError
from listing_core.models import LoadState
from listing_core.resources.base import ResourceDescriptor
from listing_core.session import SessionContext

logger = logging.getLogger(__name__)


class CancelToken:
    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def dedupe_by_id(rows: list[dict]) -> tuple[list[dict], list[str]]:
    seen: set[str] = set()
    kept: list[dict] = []
    duplicates: list[str] = []
    for row in rows:
        item_id = str(row.get("id"))
        if item_id in seen:
            duplicates.append(item_id)
            continue
        seen.add(item_id)
        kept.append(row)
    return kept, duplicates


class CollectionLoader:
    """Fetches one resource collection and holds the last good copy.

    Overlapping loads are not fenced: whichever response lands last wins.
    A failed load keeps the previous collection available.
    """

    def __init__(self, descriptor: ResourceDescriptor, client: ApiClient, session: SessionContext | None = None):
        self.descriptor = descriptor
        self.client = client
        self.session = session
        self.items: list[dict] = []
        self.state = LoadState.IDLE
        self.error: str | None = None
        self.warnings: list[str] = []
        self.loaded_once = False
        self._lock = threading.Lock()

    def _fetch(self) -> list[dict]:
        params = self.descriptor.query_params(self.session)
        rows = self.client.fetch(self.descriptor.path, self.descriptor.list_key, params)
        return [self.descriptor.normalize(row) for row in rows]

    def load(self, token: CancelToken | None = None) -> bool:
        if token is not None and token.cancelled:
            return False
        with self._lock:
            previous = self.state
            self.state = LoadState.LOADING

        try:
            rows = self._fetch()
        except TransportError as exc:
            logger.warning("loading %s failed: %s", self.descriptor.key, exc)
            return self._fail(f"Failed to load {self.descriptor.title.lower()}", token, previous)
        except ApplicationError as exc:
            logger.info("loading %s rejected: %s", self.descriptor.key, exc)
            return self._fail(str(exc), token, previous)
        except ListingError as exc:
            return self._fail(str(exc), token, previous)

        if token is not None and token.cancelled:
            logger.debug("discarding %s response after cancellation", self.descriptor.key)
            self._discard(previous)
            return False

        rows, duplicates = dedupe_by_id(rows)
        with self._lock:
            self.items = rows
            self.state = LoadState.LOADED
            self.error = None
            self.loaded_once = True
            self.warnings = [f"duplicate id dropped: {d}" for d in duplicates]
        return True

    def _discard(self, previous: LoadState) -> None:
        with self._lock:
            if self.state is LoadState.LOADING:
                self.state = previous

    def _fail(self, message: str, token: CancelToken | None, previous: LoadState) -> bool:
        if token is not None and token.cancelled:
            self._discard(previous)
            return False
        with self._lock:
            self.state = LoadState.ERRORED
            self.error = message
        return False

    def load_in_background(self, executor: Executor, token: CancelToken | None = None) -> Future:
        return executor.submit(self.load, token)

"""Generic resource store with write-through persistence."""

from __future__ import annotations

from contextlib import contextmanager
import threading
from typing import Any, Callable, Iterator, Mapping, Optional

from marketplace.core.logging import get_logger
from marketplace.repositories.base import StateStore, empty_state

log = get_logger(__name__)

Record = dict[str, Any]
Predicate = Callable[[Record], bool]

IMMUTABLE_FIELDS = frozenset({"id", "dateCreated"})


class IdAllocator:
    """Strictly increasing integer ids; the counter never moves backwards."""

    def __init__(self, seed: int = 1) -> None:
        self._next = seed

    @property
    def peek(self) -> int:
        return self._next

    def next(self) -> int:
        value = self._next
        self._next += 1
        return value

    def advance_past(self, issued: int) -> None:
        if issued >= self._next:
            self._next = issued + 1


class ResourceStore:
    """
    Ordered collection of records for one resource type.

    Every successful mutation is followed by a full ``save`` of the state. If
    the save fails the in-memory collection is restored and the error
    propagates, so memory and durable state never diverge. Mutations hold a
    per-store lock; reads work on a copy of the list.
    """

    def __init__(self, key: str, backend: StateStore, *, seed: int = 1) -> None:
        self.key = key
        self.backend = backend
        self._lock = threading.Lock()
        state = backend.load(key, empty_state(seed))
        self._items: list[Record] = [dict(item) for item in state["items"]]
        self._ids = IdAllocator(max(seed, state["nextId"]))
        for item in self._items:
            self._ids.advance_past(item["id"])
        log.info("store_loaded", key=key, backend=backend.name, count=len(self._items), next_id=self._ids.peek)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.find_all())

    @property
    def next_id(self) -> int:
        return self._ids.peek

    # ------------------------------------------------------------------
    # CRUD operations
    # ------------------------------------------------------------------
    def insert(self, record: Mapping[str, Any]) -> Record:
        with self._lock:
            return self._append(record)

    def insert_unique(self, record: Mapping[str, Any], key_field: str) -> Optional[Record]:
        """Insert unless a stored record has the same ``key_field``; None on a clash."""
        with self._lock:
            value = record.get(key_field)
            if any(item.get(key_field) == value for item in self._items):
                return None
            return self._append(record)

    def find_by_id(self, item_id: int) -> Optional[Record]:
        index = self._index_of(item_id)
        if index is None:
            return None
        return dict(self._items[index])

    def find_all(self, predicate: Optional[Predicate] = None) -> list[Record]:
        items = list(self._items)
        if predicate is None:
            return [dict(item) for item in items]
        return [dict(item) for item in items if predicate(item)]

    def update(self, item_id: int, patch: Mapping[str, Any]) -> Optional[Record]:
        with self._lock:
            index = self._index_of(item_id)
            if index is None:
                return None
            changes = {k: v for k, v in patch.items() if k not in IMMUTABLE_FIELDS}
            with self._write_through():
                updated = dict(self._items[index])
                updated.update(changes)
                self._items[index] = updated
            return dict(updated)

    def delete(self, item_id: int) -> bool:
        with self._lock:
            index = self._index_of(item_id)
            if index is None:
                return False
            with self._write_through():
                del self._items[index]
            return True

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _append(self, record: Mapping[str, Any]) -> Record:
        stored = dict(record)
        with self._write_through():
            if stored.get("id") is None:
                stored["id"] = self._ids.next()
            else:
                self._ids.advance_past(stored["id"])
            self._items.append(stored)
        return dict(stored)

    def _index_of(self, item_id: int) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.get("id") == item_id:
                return index
        return None

    @contextmanager
    def _write_through(self) -> Iterator[None]:
        """Save after the mutation; restore the collection if the mutation or the save fails."""
        items = list(self._items)
        try:
            yield
            self.backend.save(self.key, {"nextId": self._ids.peek, "items": self._items})
        except Exception:
            # ids consumed by the failed mutation stay consumed
            self._items = items
            raise

"""StateStore protocol and the in-memory backend."""

from __future__ import annotations

import copy
from typing import Any, Protocol, runtime_checkable

State = dict[str, Any]


def empty_state(seed: int = 1) -> State:
    return {"nextId": seed, "items": []}


@runtime_checkable
class StateStore(Protocol):
    """Loads and wholly replaces the durable state of one resource type."""

    name: str

    def load(self, key: str, default: State) -> State:
        ...

    def save(self, key: str, state: State) -> None:
        ...


class MemoryStateStore:
    """Keeps state in a dictionary; nothing survives the process."""

    name = "memory"

    def __init__(self) -> None:
        self._states: dict[str, State] = {}

    def load(self, key: str, default: State) -> State:
        state = self._states.get(key)
        if state is None:
            return copy.deepcopy(default)
        return copy.deepcopy(state)

    def save(self, key: str, state: State) -> None:
        self._states[key] = copy.deepcopy(state)


def coerce_state(raw: Any, default: State) -> State | None:
    """Return a normalised ``{nextId, items}`` or None when ``raw`` has the wrong shape."""
    if not isinstance(raw, dict):
        return None
    items = raw.get("items", [])
    next_id = raw.get("nextId", default["nextId"])
    if not isinstance(items, list) or isinstance(next_id, bool) or not isinstance(next_id, int):
        return None
    if not all(isinstance(item, dict) and isinstance(item.get("id"), int) for item in items):
        return None
    return {"nextId": next_id, "items": items}

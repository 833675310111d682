"""SQL persistence adapter backed by SQLAlchemy (one row per resource type)."""
from __future__ import annotations

import copy
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from marketplace.core.errors import PersistenceError
from marketplace.core.logging import get_logger
from marketplace.db.models import ResourceState
from marketplace.db.session import get_session
from marketplace.repositories.base import State, coerce_state

log = get_logger(__name__)


class SQLStateStore:
    name = "sql"

    def __init__(self, database_url: str | None = None, *, strict: bool = False) -> None:
        self.database_url = database_url or None
        self.strict = strict

    def load(self, key: str, default: State) -> State:
        try:
            with get_session(self.database_url) as session:
                row = session.get(ResourceState, key)
                raw = None if row is None else {"nextId": row.next_id, "items": row.items}
        except SQLAlchemyError as exc:
            return self._fallback(key, default, str(exc))
        if raw is None:
            return copy.deepcopy(default)
        state = coerce_state(raw, default)
        if state is None:
            return self._fallback(key, default, "unexpected row shape")
        return state

    def _fallback(self, key: str, default: State, reason: str) -> State:
        if self.strict:
            raise PersistenceError(f"State row for {key!r} is unreadable: {reason}")
        log.warning("state_unreadable_using_defaults", key=key, backend=self.name, reason=reason)
        return copy.deepcopy(default)

    def save(self, key: str, state: State) -> None:
        now = datetime.now(timezone.utc)
        try:
            with get_session(self.database_url) as session:
                row = session.get(ResourceState, key)
                if row is None:
                    row = ResourceState(key=key)
                    session.add(row)
                row.next_id = state["nextId"]
                row.items = copy.deepcopy(state["items"])
                row.updated_at = now
                session.commit()
        except SQLAlchemyError as exc:
            log.error("state_write_failed", key=key, backend=self.name, error=str(exc))
            raise PersistenceError(f"Could not write state for {key!r}") from exc

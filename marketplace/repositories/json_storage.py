"""
JSON-file persistence adapter.

One pretty-printed file per resource type, ``<directory>/<key>.json``, holding
``{"nextId": int, "items": [...]}``. The file is read whole on boot and
rewritten whole after every mutation.
"""

from __future__ import annotations

import copy
import json
import os
import tempfile
from pathlib import Path

from marketplace.core.errors import PersistenceError
from marketplace.core.logging import get_logger
from marketplace.repositories.base import State, coerce_state

log = get_logger(__name__)


class JsonStateStore:
    name = "json"

    def __init__(self, directory: str | Path, *, strict: bool = False) -> None:
        self.directory = Path(directory)
        self.strict = strict

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str, default: State) -> State:
        path = self.path_for(key)
        if not path.exists():
            return copy.deepcopy(default)
        try:
            with path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            return self._fallback(key, path, default, str(exc))
        state = coerce_state(raw, default)
        if state is None:
            return self._fallback(key, path, default, "unexpected document shape")
        return state

    def _fallback(self, key: str, path: Path, default: State, reason: str) -> State:
        if self.strict:
            raise PersistenceError(f"State file for {key!r} is unreadable: {reason}")
        log.warning("state_unreadable_using_defaults", key=key, path=str(path), reason=reason)
        return copy.deepcopy(default)

    def save(self, key: str, state: State) -> None:
        path = self.path_for(key)
        tmp_name = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self.directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(state, f, ensure_ascii=False, indent=2, allow_nan=False)
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            log.error("state_write_failed", key=key, path=str(path), error=str(exc))
            raise PersistenceError(f"Could not write state for {key!r}") from exc

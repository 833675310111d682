"""
CRUD use cases shared by every listing resource type.

One ResourceService instance exists per resource type; it owns that type's
ResourceStore and differs from the others only through its ResourceDefinition.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from pydantic import ValidationError as SchemaError

from marketplace.core.errors import NotFoundError, ValidationError
from marketplace.core.logging import get_logger
from marketplace.domain.filters import build_predicate
from marketplace.domain.resources import ResourceDefinition
from marketplace.repositories.resource_store import Record, ResourceStore

log = get_logger(__name__)

MISSING_FIELDS_MESSAGE = "Missing required fields"


def utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class ResourceService:
    """Validates payloads and runs them against one store."""

    def __init__(self, definition: ResourceDefinition, store: ResourceStore) -> None:
        self.definition = definition
        self.store = store

    # -------------------------------------- helpers --------------------------------------
    def parse(self, payload: Any, *, partial: bool = False) -> dict[str, Any]:
        """
        Validate ``payload`` against the type's schema.

        Returns only the fields the caller actually sent. For a full payload
        every required field must be present and non-blank, and missing
        optional fields get their defaults. For a partial payload a blank
        required field counts as omitted, while optional fields keep explicit
        values such as ``0`` or ``None``.
        """
        if not isinstance(payload, Mapping):
            raise ValidationError("Request body must be a JSON object")
        try:
            model = self.definition.schema.model_validate(dict(payload))
        except SchemaError as exc:
            errors = [
                {"field": ".".join(str(p) for p in err["loc"]), "error": err["msg"]}
                for err in exc.errors()
            ]
            raise ValidationError("Invalid request body", errors=errors) from None
        provided = model.model_dump(exclude_unset=True)

        if partial:
            return {
                name: value
                for name, value in provided.items()
                if name not in self.definition.required or not _blank(value)
            }

        missing = [name for name in self.definition.required if _blank(provided.get(name))]
        if missing:
            raise ValidationError(
                MISSING_FIELDS_MESSAGE,
                errors=[{"field": name, "error": "required"} for name in missing],
            )
        values = {name: provided[name] for name in self.definition.required}
        for name in self.definition.optional:
            if not _blank(provided.get(name)):
                values[name] = provided[name]
            else:
                values[name] = self.definition.defaults.get(name)
        return values

    def _not_found(self) -> NotFoundError:
        return NotFoundError(f"{self.definition.label} not found")

    # -------------------------------------- queries --------------------------------------
    def list(self, query: Optional[Mapping[str, Optional[str]]] = None) -> list[Record]:
        predicate = build_predicate(self.definition.filters, query or {})
        return self.store.find_all(predicate)

    def get(self, item_id: int) -> Record:
        record = self.store.find_by_id(item_id)
        if record is None:
            raise self._not_found()
        return record

    # -------------------------------------- mutations --------------------------------------
    def create(self, payload: Any, *, created_by: Optional[str] = None) -> Record:
        values = self.parse(payload)
        record = {"id": None, **values, "dateCreated": utc_timestamp()}
        stored = self.store.insert(record)
        log.info("record_created", resource=self.definition.key, id=stored["id"], by=created_by)
        return stored

    def update(self, item_id: int, payload: Any) -> Record:
        changes = self.parse(payload, partial=True)
        record = self.store.update(item_id, changes)
        if record is None:
            raise self._not_found()
        log.info("record_updated", resource=self.definition.key, id=item_id, fields=sorted(changes))
        return record

    def delete(self, item_id: int) -> None:
        if not self.store.delete(item_id):
            raise self._not_found()
        log.info("record_deleted", resource=self.definition.key, id=item_id)

"""Query-parameter filters used by list endpoints."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from marketplace.core.errors import ValidationError

Predicate = Callable[[Mapping[str, Any]], bool]

CONTAINS = "contains"
EQUALS = "equals"
MINIMUM = "min"
MAXIMUM = "max"


@dataclass(frozen=True)
class FilterSpec:
    """Maps query parameter ``param`` onto record ``field`` with a match ``kind``."""

    param: str
    field: str
    kind: str

    def predicate(self, raw: str) -> Predicate:
        if self.kind == CONTAINS:
            needle = raw.lower()
            return lambda record: needle in _text(record.get(self.field))
        if self.kind == EQUALS:
            wanted = raw.lower()
            return lambda record: _text(record.get(self.field)) == wanted
        bound = _number(self.param, raw)
        if self.kind == MINIMUM:
            return lambda record: _is_number(record.get(self.field)) and record[self.field] >= bound
        if self.kind == MAXIMUM:
            return lambda record: _is_number(record.get(self.field)) and record[self.field] <= bound
        raise ValueError(f"Unknown filter kind {self.kind!r}")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).lower()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _number(param: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise ValidationError(f"Query parameter {param!r} must be a number") from None


def build_predicate(specs: tuple[FilterSpec, ...], query: Mapping[str, Optional[str]]) -> Optional[Predicate]:
    """Combine every supplied, non-blank filter with AND; None when nothing applies."""
    active = []
    for spec in specs:
        raw = query.get(spec.param)
        if raw is None or not str(raw).strip():
            continue
        active.append(spec.predicate(str(raw).strip()))
    if not active:
        return None
    return lambda record: all(check(record) for check in active)

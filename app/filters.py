"""Free-text search combined with discrete-value filters."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Sequence

from app.conditions import matches
from app.entities import fields_by_id, filter_dimensions

ALL = "all"
_NUMBERED_ID_RE = re.compile(r"\D*(\d+)")


def is_unconstrained(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and value.strip().lower() in ("", ALL)


@dataclass
class FilterState:
    query: str = ""
    selections: Dict[str, Any] = field(default_factory=dict)

    def set_query(self, query: Any) -> None:
        self.query = query if isinstance(query, str) else ""

    def select(self, dimension: str, value: Any) -> None:
        self.selections[dimension] = ALL if is_unconstrained(value) else value

    def reset(self) -> None:
        self.query = ""
        self.selections = {dim: ALL for dim in self.selections}

    def active_selections(self) -> Dict[str, Any]:
        return {dim: val for dim, val in self.selections.items() if not is_unconstrained(val)}

    def is_identity(self) -> bool:
        return not self.query.strip() and not self.active_selections()

    def to_dict(self) -> dict:
        return {"query": self.query, "selections": dict(self.selections)}


def search_condition(search_fields: Sequence[str], query: str) -> dict | None:
    needle = query.strip() if isinstance(query, str) else ""
    if not needle or not search_fields:
        return None
    return {
        "op": "or",
        "conditions": [{"op": "icontains", "field": f, "value": needle} for f in search_fields],
    }


def dimension_condition(entity: dict, dimension: str, value: Any) -> dict:
    field_id = filter_dimensions(entity).get(dimension, dimension)
    field_def = fields_by_id(entity).get(field_id) or {}
    op = "contains" if field_def.get("type") == "tags" else "eq"
    return {"op": op, "field": field_id, "value": value}


def build_condition(entity: dict, state: FilterState) -> dict | None:
    """Compose the search and dimension predicates into one AND condition."""
    parts: List[dict] = []
    search = search_condition(entity.get("search_fields") or [], state.query)
    if search:
        parts.append(search)
    for dimension, value in state.active_selections().items():
        parts.append(dimension_condition(entity, dimension, value))
    if not parts:
        return None
    return {"op": "and", "conditions": parts}


def apply_filters(entity: dict, records: Sequence[dict], state: FilterState) -> list[dict]:
    condition = build_condition(entity, state)
    if condition is None:
        return list(records)
    return [record for record in records if matches(condition, record)]


def distinct_values(records: Iterable[dict], field_id: str) -> list:
    """Unique values of ``field_id`` in first-seen order; tag arrays are flattened."""
    seen: list = []
    for record in records:
        value = record.get(field_id) if isinstance(record, dict) else None
        values = value if isinstance(value, list) else [value]
        for item in values:
            if item is None or item == "":
                continue
            if item not in seen:
                seen.append(item)
    return seen


def option_lists(entity: dict, records: Sequence[dict]) -> Dict[str, list]:
    return {dim: distinct_values(records, field_id) for dim, field_id in filter_dimensions(entity).items()}


def _digits_value(value: Any) -> int:
    """Trailing number of a prefix-then-digits id such as ``STD-1004``; anything else is 0."""
    match = _NUMBERED_ID_RE.fullmatch(str(value or "").strip())
    return int(match.group(1)) if match else 0


def sort_records(entity: dict, records: Sequence[dict]) -> list[dict]:
    sort = entity.get("sort")
    if not isinstance(sort, dict) or not sort.get("field"):
        return list(records)
    field_id = sort["field"]
    descending = bool(sort.get("descending"))
    if sort.get("digits"):
        return sorted(records, key=lambda r: _digits_value(r.get(field_id)), reverse=descending)
    return sorted(records, key=lambda r: str(r.get(field_id) or "").lower(), reverse=descending)


def tally(records: Sequence[dict], field_id: str, values: Sequence[Any] | None = None) -> dict:
    """Count records per value of ``field_id``.

    ``values`` pre-seeds zero counts so absent categories still show up.
    """
    counts: Dict[Any, int] = {v: 0 for v in values or []}
    for record in records:
        value = record.get(field_id)
        keys = value if isinstance(value, list) else [value]
        for key in keys:
            if key is None:
                key = ""
            counts[key] = counts.get(key, 0) + 1
    groups = [{"key": key, "value": count} for key, count in counts.items()]
    return {"field": field_id, "total": len(records), "groups": groups}

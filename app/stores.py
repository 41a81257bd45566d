"""In-memory stores for entity records and mounted list views."""

from __future__ import annotations

import copy
import logging
import uuid
from typing import Any, Dict, Iterable, List

from app.entities import blank_record
from app.records_validation import clean_values, normalize_tags

logger = logging.getLogger("masterdata.records")


def toggle_tag(tags: list | None, value: str) -> list:
    """Flip membership of ``value``; absent values are appended."""
    current = normalize_tags(list(tags or []))
    value = value.strip() if isinstance(value, str) else value
    if not isinstance(value, str) or not value:
        return current
    if value in current:
        return [tag for tag in current if tag != value]
    return current + [value]


def _trim_generic(values: dict) -> dict:
    trimmed = {}
    for key, value in values.items():
        if isinstance(value, str):
            trimmed[key] = value.strip()
        elif isinstance(value, list):
            trimmed[key] = normalize_tags(value) if all(isinstance(v, str) for v in value) else copy.deepcopy(value)
        else:
            trimmed[key] = copy.deepcopy(value)
    return trimmed


class MemoryEntityStore:
    """Ordered records of one entity kind, keyed by a random id.

    Insertion order is kept on create, updates keep position and deletes
    leave the remaining order untouched. Returned records are copies.
    """

    def __init__(self, entity: dict | None = None, records: Iterable[dict] | None = None) -> None:
        self._entity = copy.deepcopy(entity) if entity else None
        self._records: Dict[str, dict] = {}
        if records:
            self.seed(records)

    @property
    def entity_id(self) -> str:
        return (self._entity or {}).get("id") or "entity.generic"

    def _clean(self, fields: dict) -> dict:
        if not isinstance(fields, dict):
            return {}
        if self._entity is None:
            values = _trim_generic({k: v for k, v in fields.items() if k != "id"})
            return values
        values, unknown, problems = clean_values(self._entity, fields)
        if unknown:
            logger.warning("record_unknown_fields_dropped entity_id=%s fields=%s", self.entity_id, sorted(unknown))
        if problems:
            logger.warning("record_invalid_values_dropped entity_id=%s fields=%s", self.entity_id, sorted(problems))
            values = {key: val for key, val in values.items() if key not in problems}
        return values

    def _new_id(self) -> str:
        return str(uuid.uuid4())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def ids(self) -> List[str]:
        return list(self._records.keys())

    def list(self) -> list[dict]:
        return [copy.deepcopy(r) for r in self._records.values()]

    def get(self, record_id: str) -> dict | None:
        record = self._records.get(record_id)
        return copy.deepcopy(record) if record else None

    def create(self, fields: dict) -> dict:
        record_id = self._new_id()
        record = blank_record(self._entity) if self._entity else {}
        record.update(self._clean(fields))
        record["id"] = record_id
        self._records[record_id] = record
        logger.info("record_created entity_id=%s record_id=%s", self.entity_id, record_id)
        return copy.deepcopy(record)

    def update(self, record_id: str, fields: dict) -> dict | None:
        record = self._records.get(record_id)
        if record is None:
            logger.debug("record_update_stale entity_id=%s record_id=%s", self.entity_id, record_id)
            return None
        record.update(self._clean(fields))
        record["id"] = record_id
        logger.info("record_updated entity_id=%s record_id=%s", self.entity_id, record_id)
        return copy.deepcopy(record)

    def delete(self, record_id: str) -> bool:
        if record_id not in self._records:
            logger.debug("record_delete_stale entity_id=%s record_id=%s", self.entity_id, record_id)
            return False
        del self._records[record_id]
        logger.info("record_deleted entity_id=%s record_id=%s", self.entity_id, record_id)
        return True

    def toggle_tag(self, record_id: str, field_id: str, value: str) -> dict | None:
        record = self._records.get(record_id)
        if record is None:
            return None
        return self.update(record_id, {field_id: toggle_tag(record.get(field_id), value)})

    def seed(self, records: Iterable[dict]) -> int:
        """Replace the contents with upstream records, keeping their ids."""
        self._records = {}
        for raw in records:
            if not isinstance(raw, dict):
                continue
            raw_id = raw.get("id")
            record_id = str(raw_id).strip() if raw_id not in (None, "") else self._new_id()
            if record_id in self._records:
                logger.warning("record_seed_duplicate entity_id=%s record_id=%s", self.entity_id, record_id)
                continue
            record = blank_record(self._entity) if self._entity else {}
            record.update(self._clean(raw))
            record["id"] = record_id
            self._records[record_id] = record
        logger.info("records_seeded entity_id=%s count=%s", self.entity_id, len(self._records))
        return len(self._records)


class MemoryViewStore:
    """Mounted list views keyed by view id; unmounting discards all state."""

    def __init__(self) -> None:
        self._views: Dict[str, Any] = {}

    def mount(self, view: Any) -> str:
        view_id = str(uuid.uuid4())
        self._views[view_id] = view
        return view_id

    def get(self, view_id: str) -> Any | None:
        return self._views.get(view_id)

    def unmount(self, view_id: str) -> bool:
        if view_id in self._views:
            del self._views[view_id]
            return True
        return False

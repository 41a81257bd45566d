"""One mounted list view: store + filter state + paginator + edit session."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Sequence

from app.entities import filter_dimensions, page_size_for
from app.filters import FilterState, apply_filters, option_lists, sort_records, tally
from app.records_validation import field_errors, log_validation_failure, validate_record_payload
from app.stores import MemoryEntityStore
from edit_session import EditSessionController
from masterdata.pagination import Page, paginate

logger = logging.getLogger("masterdata.views")


class ListView:
    def __init__(
        self,
        entity: dict,
        records: Iterable[dict] | None = None,
        page_size: int | None = None,
        t: Callable[..., str] | None = None,
    ) -> None:
        self.entity = entity
        self.store = MemoryEntityStore(entity, records)
        self.filters = FilterState(selections={dim: "all" for dim in filter_dimensions(entity)})
        self.page_size = page_size if page_size is not None else page_size_for(entity)
        if not isinstance(self.page_size, int) or isinstance(self.page_size, bool) or self.page_size < 1:
            raise ValueError(f"page_size must be a positive integer, got {self.page_size!r}")
        self.requested_page = 1
        self._t = t
        self.sessions = EditSessionController(entity, self.store, t=t)

    @property
    def entity_id(self) -> str:
        return self.entity.get("id")

    def set_lookup(self, t: Callable[..., str] | None) -> None:
        self._t = t
        self.sessions.set_lookup(t)

    # filter state; every change restarts at page 1

    def set_query(self, query: Any) -> None:
        self.filters.set_query(query)
        self.requested_page = 1

    def select(self, dimension: str, value: Any) -> bool:
        if dimension not in filter_dimensions(self.entity):
            return False
        self.filters.select(dimension, value)
        self.requested_page = 1
        return True

    def reset_filters(self) -> None:
        self.filters.reset()
        self.requested_page = 1

    def set_page_size(self, page_size: int) -> None:
        if not isinstance(page_size, int) or isinstance(page_size, bool) or page_size < 1:
            raise ValueError(f"page_size must be a positive integer, got {page_size!r}")
        self.page_size = page_size
        self.requested_page = 1

    def go_to_page(self, page: Any) -> Page:
        self.requested_page = page
        current = self.visible_page()
        self.requested_page = current.page
        return current

    # derived data

    def filtered(self) -> list[dict]:
        records = sort_records(self.entity, self.store.list())
        return apply_filters(self.entity, records, self.filters)

    def visible_page(self) -> Page:
        return paginate(self.filtered(), self.requested_page, self.page_size)

    def options(self) -> dict:
        return option_lists(self.entity, self.store.list())

    def tally(self, field_id: str, values: Sequence[Any] | None = None) -> dict:
        return tally(self.store.list(), field_id, values)

    def table_props(self) -> dict:
        page = self.visible_page()
        return {"records": page.items, "page": page.to_dict()}

    def snapshot(self) -> dict:
        page = self.visible_page()
        return {
            "entity_id": self.entity_id,
            "filters": self.filters.to_dict(),
            "options": self.options(),
            "page": page.to_dict(),
            "session": self.sessions.form_props(),
        }

    # table callbacks

    def on_add(self) -> dict:
        self.sessions.open_for_create()
        return self.sessions.form_props()

    def on_edit(self, record: dict | str) -> dict | None:
        record_id = record.get("id") if isinstance(record, dict) else record
        current = self.store.get(record_id) if isinstance(record_id, str) else None
        if current is None:
            logger.info("view_edit_stale entity_id=%s record_id=%s", self.entity_id, record_id)
            return None
        self.sessions.open_for_edit(current)
        return self.sessions.form_props()

    def on_delete(self, record: dict | str) -> bool:
        record_id = record.get("id") if isinstance(record, dict) else record
        return self.store.delete(record_id)

    def update_details(self, record_id: str, fields: Any) -> dict:
        """Validated partial update used by inline table edits."""
        errors, clean = validate_record_payload(self.entity, fields, for_create=False, t=self._t)
        if errors:
            log_validation_failure(self.entity_id, fields, errors)
            return {"ok": False, "errors": errors, "field_errors": field_errors(errors), "record": None, "applied": False}
        record = self.store.update(record_id, clean)
        return {"ok": True, "errors": [], "field_errors": {}, "record": record, "applied": record is not None}

    def toggle_tag(self, record_id: str, field_id: str, value: str) -> dict:
        field_def = next((f for f in self.entity.get("fields") or [] if f.get("id") == field_id), None)
        if not field_def or field_def.get("type") != "tags":
            message = self._t("validation.notTags", field=field_id) if self._t else "validation.notTags"
            return {
                "ok": False,
                "errors": [{"code": "TYPE_MISMATCH", "message": message, "path": field_id, "detail": None}],
                "record": None,
                "applied": False,
            }
        record = self.store.toggle_tag(record_id, field_id, value)
        return {"ok": True, "errors": [], "record": record, "applied": record is not None}

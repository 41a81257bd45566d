"""Add/edit session state for entity forms.

A controller is Closed until ``open_for_create`` or ``open_for_edit`` is
called. Each open session gets a new ``session_id`` and its own copy of the
form values, so nothing typed into one session can reach another session or
the store before a successful ``save``.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict

from app.entities import blank_record, fields_by_id
from app.records_validation import field_errors, log_validation_failure, validate_record_payload

logger = logging.getLogger("masterdata.sessions")

Issue = Dict[str, Any]

MODE_CREATE = "create"
MODE_EDIT = "edit"


def _issue(code: str, message: str, path: str | None = None, detail: dict | None = None) -> Issue:
    return {"code": code, "message": message, "path": path, "detail": detail}


@dataclass
class EditSession:
    session_id: int
    mode: str
    target_id: str | None
    initial_values: dict
    errors: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "mode": self.mode,
            "target_id": self.target_id,
            "initial_values": copy.deepcopy(self.initial_values),
            "errors": dict(self.errors),
        }


class EditSessionController:
    def __init__(self, entity: dict, store, t: Callable[..., str] | None = None) -> None:
        self._entity = entity
        self._store = store
        self._t = t
        self._counter = 0
        self._session: EditSession | None = None

    @property
    def session(self) -> EditSession | None:
        return self._session

    @property
    def is_open(self) -> bool:
        return self._session is not None

    def set_lookup(self, t: Callable[..., str] | None) -> None:
        self._t = t

    def _next_id(self) -> int:
        self._counter += 1
        return self._counter

    def open_for_create(self) -> EditSession:
        self._session = EditSession(
            session_id=self._next_id(),
            mode=MODE_CREATE,
            target_id=None,
            initial_values=blank_record(self._entity),
        )
        logger.info("session_opened entity_id=%s mode=create session_id=%s", self._entity.get("id"), self._session.session_id)
        return self._session

    def open_for_edit(self, record: dict) -> EditSession:
        known = fields_by_id(self._entity)
        values = blank_record(self._entity)
        values.update({k: copy.deepcopy(v) for k, v in record.items() if k in known})
        self._session = EditSession(
            session_id=self._next_id(),
            mode=MODE_EDIT,
            target_id=record.get("id"),
            initial_values=values,
        )
        logger.info(
            "session_opened entity_id=%s mode=edit session_id=%s record_id=%s",
            self._entity.get("id"),
            self._session.session_id,
            self._session.target_id,
        )
        return self._session

    def close(self) -> None:
        if self._session is not None:
            logger.info("session_closed entity_id=%s session_id=%s", self._entity.get("id"), self._session.session_id)
        self._session = None

    def form_props(self) -> dict | None:
        if self._session is None:
            return None
        return {
            "session_id": self._session.session_id,
            "mode": self._session.mode,
            "initial_values": copy.deepcopy(self._session.initial_values),
            "errors": dict(self._session.errors),
        }

    def save(self, values: Any) -> dict:
        session = self._session
        if session is None:
            message = self._t("validation.sessionClosed") if self._t else "validation.sessionClosed"
            return {
                "ok": False,
                "errors": [_issue("SESSION_CLOSED", message, "session")],
                "field_errors": {},
                "record": None,
                "mode": None,
            }

        errors, clean = validate_record_payload(self._entity, values, for_create=True, t=self._t)
        if errors:
            session.errors = field_errors(errors)
            log_validation_failure(self._entity.get("id"), values, errors)
            return {
                "ok": False,
                "errors": errors,
                "field_errors": dict(session.errors),
                "record": None,
                "mode": session.mode,
            }

        if session.target_id is not None:
            record = self._store.update(session.target_id, clean)
        else:
            record = self._store.create(clean)
        mode = session.mode
        self.close()
        return {"ok": True, "errors": [], "field_errors": {}, "record": record, "mode": mode}

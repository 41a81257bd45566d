"""Record normalization and validation for entity forms."""

from __future__ import annotations

import logging
import math
import re
from datetime import date
from typing import Any, Callable, Dict, List

from app.entities import blank_record, enum_values, fields_by_id

logger = logging.getLogger("masterdata.records")

Issue = Dict[str, Any]
TextLookup = Callable[..., str]

EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
URL_RE = re.compile(r"https?://.+", re.IGNORECASE | re.DOTALL)
STRING_TYPES = {"string", "text", "email", "url", "enum", "date"}
FORM_PATH = "$"


def _identity_lookup(key: str, **params: Any) -> str:
    return key


def _issue(code: str, message: str, path: str | None = None, detail: dict | None = None) -> Issue:
    return {"code": code, "message": message, "path": path, "detail": detail}


def normalize_tags(values: list) -> list:
    tags: list = []
    for value in values:
        if not isinstance(value, str):
            continue
        value = value.strip()
        if value and value not in tags:
            tags.append(value)
    return tags


def _parse_number(value: Any) -> tuple[bool, Any]:
    if value is None:
        return True, None
    if isinstance(value, bool):
        return False, value
    if isinstance(value, int):
        return True, value
    if isinstance(value, float):
        return math.isfinite(value), value
    if isinstance(value, str):
        text = value.strip()
        if text == "":
            return True, None
        try:
            number = float(text)
        except ValueError:
            return False, text
        if not math.isfinite(number):
            return False, text
        return True, int(number) if number.is_integer() else number
    return False, value


def _clean_value(field: dict, value: Any) -> tuple[Any, str | None]:
    """Trim one value; returns (clean value, problem code or None)."""
    ftype = field.get("type") or "string"
    if ftype == "tags":
        if value is None:
            return [], None
        if not isinstance(value, list):
            return value, "TYPE_MISMATCH"
        return normalize_tags(value), None
    if ftype == "number":
        ok, number = _parse_number(value)
        return number, None if ok else "INVALID_NUMBER"
    if value is None:
        return "", None
    if not isinstance(value, str):
        return value, "TYPE_MISMATCH"
    return value.strip(), None


def clean_values(entity: dict, data: dict) -> tuple[dict, list[str], dict]:
    """Trim ``data`` against the entity fields.

    Returns the cleaned known fields, the unknown keys, and a map of
    field id -> problem code for values that could not be normalized.
    Never mutates ``data``.
    """
    field_by_id = fields_by_id(entity)
    clean: dict = {}
    unknown: list[str] = []
    problems: dict = {}
    for key, value in data.items():
        if key == "id":
            continue
        field = field_by_id.get(key)
        if field is None:
            unknown.append(key)
            continue
        cleaned, problem = _clean_value(field, value)
        clean[key] = cleaned
        if problem:
            problems[key] = problem
    return clean, unknown, problems


def _apply_defaults(entity: dict, data: dict) -> dict:
    field_by_id = fields_by_id(entity)
    updated = blank_record(entity)
    for field_id, value in data.items():
        if "default" in field_by_id.get(field_id, {}) and _is_empty(value):
            continue
        updated[field_id] = value
    return updated


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == []


def _message(field: dict, kind: str, t: TextLookup) -> str:
    messages = field.get("messages") if isinstance(field.get("messages"), dict) else {}
    key = messages.get(kind)
    if not key and kind != "required":
        key = messages.get("invalid")
    if key:
        return t(key)
    return t(f"validation.{kind}", label=t(field.get("label") or field.get("id")))


def validate_record_payload(
    entity: dict,
    data: Any,
    for_create: bool = True,
    t: TextLookup | None = None,
) -> tuple[list[Issue], dict]:
    """Validate a trimmed candidate.

    ``for_create`` checks every required field; otherwise only the supplied
    keys are checked, which is how inline edits update a subset of fields.
    """
    t = t or _identity_lookup
    errors: list[Issue] = []
    if not isinstance(data, dict):
        return [_issue("INVALID_PAYLOAD", t("validation.payload"), FORM_PATH)], {}

    field_by_id = fields_by_id(entity)
    clean, unknown, problems = clean_values(entity, data)

    for key in unknown:
        errors.append(_issue("UNKNOWN_FIELD", t("validation.unknown", field=key), key))

    if for_create:
        clean = _apply_defaults(entity, clean)

    for field_id, field in field_by_id.items():
        if field_id not in clean:
            continue
        val = clean[field_id]
        problem = problems.get(field_id)
        if problem == "TYPE_MISMATCH":
            errors.append(_issue("TYPE_MISMATCH", _message(field, "type", t), field_id))
            continue
        if field.get("required") and _is_empty(val):
            errors.append(_issue("REQUIRED_FIELD", _message(field, "required", t), field_id))
            continue
        if problem == "INVALID_NUMBER":
            errors.append(_issue("INVALID_NUMBER", _message(field, "number", t), field_id))
            continue
        if _is_empty(val):
            continue
        ftype = field.get("type")
        if ftype == "email" and not EMAIL_RE.fullmatch(val):
            errors.append(_issue("INVALID_EMAIL", _message(field, "email", t), field_id))
        elif ftype == "url" and not URL_RE.fullmatch(val):
            errors.append(_issue("INVALID_URL", _message(field, "url", t), field_id))
        elif ftype == "enum":
            allowed = enum_values(field)
            if allowed and val not in allowed:
                errors.append(_issue("INVALID_ENUM", _message(field, "enum", t), field_id, detail={"allowed": allowed}))
        elif ftype == "date":
            try:
                date.fromisoformat(val)
            except ValueError:
                errors.append(_issue("INVALID_DATE", _message(field, "date", t), field_id))

    return errors, clean


def field_errors(issues: List[Issue]) -> dict:
    """Collapse issues to ``{field: message}``, keeping the first per field."""
    out: dict = {}
    for issue in issues:
        path = issue.get("path") or FORM_PATH
        if path not in out:
            out[path] = issue.get("message")
    return out


def validate(entity: dict, candidate: Any, t: TextLookup | None = None) -> dict:
    errors, _ = validate_record_payload(entity, candidate, for_create=True, t=t)
    return field_errors(errors)


def log_validation_failure(entity_id: str, payload: Any, errors: List[Issue]) -> None:
    payload = payload if isinstance(payload, dict) else {}
    logger.warning(
        "record_validation_failed entity_id=%s fields=%s codes=%s payload_keys=%s",
        entity_id,
        sorted({err.get("path") for err in errors if err.get("path")}),
        sorted({err.get("code") for err in errors}),
        sorted(payload.keys()),
    )

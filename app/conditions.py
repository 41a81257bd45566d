"""Predicate DSL evaluated against list records.

A condition is a dict: ``{"op": "and"|"or", "conditions": [...]}`` or a leaf
``{"op": <leaf op>, "field": "<dotted path>", "value": <operand>}``.
Malformed or unknown conditions never match.
"""

from __future__ import annotations

from typing import Any, Callable, Dict


def field_value(record: Any, path: str) -> Any:
    if not isinstance(record, dict) or not isinstance(path, str) or not path:
        return None
    if path in record:
        return record[path]
    current: Any = record
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return None
        current = current[part]
    return current


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _contains(value: Any, operand: Any) -> bool:
    if isinstance(value, list):
        return operand in value
    if isinstance(value, str) and isinstance(operand, str):
        return operand in value
    return False


def _icontains(value: Any, operand: Any) -> bool:
    if not isinstance(operand, str):
        return False
    needle = operand.lower()
    if isinstance(value, list):
        return any(isinstance(item, str) and needle in item.lower() for item in value)
    if _is_number(value):
        value = str(value)
    return isinstance(value, str) and needle in value.lower()


LEAF_OPS: Dict[str, Callable[[Any, Any], bool]] = {
    "eq": lambda value, operand: value == operand,
    "contains": _contains,
    "icontains": _icontains,
}


def eval_condition(condition: Any, record: dict) -> bool:
    if not isinstance(condition, dict):
        return False
    op = condition.get("op")
    if op == "and":
        parts = condition.get("conditions") or []
        return all(eval_condition(part, record) for part in parts)
    if op == "or":
        parts = condition.get("conditions") or []
        return any(eval_condition(part, record) for part in parts)
    check = LEAF_OPS.get(op)
    if check is None:
        return False
    return check(field_value(record, condition.get("field")), condition.get("value"))


def matches(condition: dict | None, record: dict) -> bool:
    """Like ``eval_condition`` but ``None`` (no predicate) matches every record."""
    if condition is None:
        return True
    return eval_condition(condition, record)

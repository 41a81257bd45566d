"""Sandboxed rendering of parameterized UI messages ("{{ label }} is required.")."""

from __future__ import annotations

from typing import Any, Iterable, Tuple

from jinja2 import StrictUndefined, TemplateSyntaxError, Undefined, UndefinedError
from jinja2.sandbox import ImmutableSandboxedEnvironment

_ALLOWED_FILTERS = {
    "default",
    "lower",
    "upper",
    "title",
    "trim",
    "length",
}


class _LockedSandbox(ImmutableSandboxedEnvironment):
    def is_safe_attribute(self, obj, attr, value) -> bool:
        return False

    def is_safe_callable(self, obj) -> bool:
        return False


def _env(strict: bool) -> _LockedSandbox:
    env = _LockedSandbox(autoescape=False, undefined=StrictUndefined if strict else Undefined)
    env.globals = {}
    env.filters = {key: val for key, val in env.filters.items() if key in _ALLOWED_FILTERS}
    env.tests = {}
    return env


def _sanitize_value(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (list, tuple)):
        return [_sanitize_value(val) for val in value]
    return str(value)


def has_placeholders(text: str | None) -> bool:
    return isinstance(text, str) and ("{{" in text or "{%" in text)


def render_message(text: str | None, params: dict[str, Any] | None = None, strict: bool = False) -> str:
    if not has_placeholders(text):
        return text or ""
    context = {str(key): _sanitize_value(val) for key, val in (params or {}).items()}
    return _env(strict=strict).from_string(text).render(context)


def validate_messages(messages: Iterable[Tuple[str, str | None]]) -> list[dict]:
    """Report syntax errors in message templates as ``{key, message, line}``."""
    errors: list[dict] = []
    env = _env(strict=False)
    for key, text in messages:
        if not has_placeholders(text):
            continue
        try:
            env.parse(text)
        except TemplateSyntaxError as exc:
            errors.append({"key": key, "message": exc.message, "line": exc.lineno or 1})
    return errors


def safe_render(text: str | None, params: dict[str, Any] | None = None) -> str:
    """Render, falling back to the raw text when the template is broken."""
    try:
        return render_message(text, params, strict=False)
    except (TemplateSyntaxError, UndefinedError):
        return text or ""

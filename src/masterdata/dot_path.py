"""Resolution of dot-separated hierarchical keys ("a.b.c") in nested dicts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List


@dataclass
class DotPathError(Exception):
    message: str
    segment: str
    path_so_far: str

    def __str__(self) -> str:  # pragma: no cover - simple formatting
        return f"{self.message} (segment={self.segment!r}, path={self.path_so_far!r})"


class KeyMissing(DotPathError):
    pass


class NotAContainer(DotPathError):
    pass


class EmptySegment(DotPathError):
    pass


def split_key(key: str) -> List[str]:
    if not isinstance(key, str) or key == "":
        return []
    return key.split(".")


def resolve_dot_path(doc: Any, key: str) -> Any:
    """Walk ``doc`` along ``key`` and return the value found there."""
    segments = split_key(key)
    if not segments:
        raise EmptySegment("Empty key", "", "")

    current = doc
    walked: List[str] = []
    for segment in segments:
        path_so_far = ".".join(walked)
        if segment == "":
            raise EmptySegment("Empty key segment", segment, path_so_far)
        if not isinstance(current, dict):
            raise NotAContainer("Cannot traverse into non-object", segment, path_so_far)
        if segment not in current:
            raise KeyMissing("Missing key", segment, path_so_far)
        current = current[segment]
        walked.append(segment)
    return current


def lookup(doc: Any, key: str, default: Any = None) -> Any:
    try:
        return resolve_dot_path(doc, key)
    except DotPathError:
        return default


def flatten_keys(doc: Any, prefix: str = "") -> List[str]:
    """List every leaf key of ``doc`` in dotted form, depth first."""
    if not isinstance(doc, dict):
        return [prefix] if prefix else []
    keys: List[str] = []
    for name, value in doc.items():
        full = f"{prefix}.{name}" if prefix else str(name)
        if isinstance(value, dict):
            keys.extend(flatten_keys(value, full))
        else:
            keys.append(full)
    return keys

"""Deterministic page slicing with clamped page numbers."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, List, Sequence


@dataclass
class Page:
    items: List[Any] = field(default_factory=list)
    page: int = 1
    requested_page: int = 1
    page_size: int = 1
    total_items: int = 0
    total_pages: int = 1
    start_index: int = 0

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    def to_dict(self) -> dict:
        return {
            "items": list(self.items),
            "page": self.page,
            "requested_page": self.requested_page,
            "page_size": self.page_size,
            "total_items": self.total_items,
            "total_pages": self.total_pages,
            "start_index": self.start_index,
            "has_prev": self.has_prev,
            "has_next": self.has_next,
        }


def _check_page_size(page_size: Any) -> int:
    if not isinstance(page_size, int) or isinstance(page_size, bool) or page_size < 1:
        raise ValueError(f"page_size must be a positive integer, got {page_size!r}")
    return page_size


def coerce_page(page: Any) -> int:
    if isinstance(page, bool):
        return 1
    if isinstance(page, int):
        return page
    if isinstance(page, str):
        try:
            return int(page.strip())
        except ValueError:
            return 1
    return 1


def total_pages(total_items: int, page_size: int) -> int:
    """Page count for ``total_items``; never less than one."""
    page_size = _check_page_size(page_size)
    return max(1, math.ceil(max(total_items, 0) / page_size))


def clamp_page(page: Any, pages: int) -> int:
    page = coerce_page(page)
    return min(max(page, 1), max(pages, 1))


def paginate(items: Sequence[Any], page: Any, page_size: int) -> Page:
    """Return the clamped page of ``items``.

    Out-of-range requests land on the nearest boundary page instead of
    failing, so a filter that shrinks the result set never strands the
    caller on an empty page.
    """
    page_size = _check_page_size(page_size)
    requested = coerce_page(page)
    count = len(items)
    pages = total_pages(count, page_size)
    effective = clamp_page(requested, pages)
    start = (effective - 1) * page_size
    return Page(
        items=list(items[start : start + page_size]),
        page=effective,
        requested_page=requested,
        page_size=page_size,
        total_items=count,
        total_pages=pages,
        start_index=start,
    )

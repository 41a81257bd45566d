"""Master data kernel utilities."""

from .dot_path import DotPathError, lookup, resolve_dot_path
from .pagination import Page, clamp_page, paginate, total_pages

__all__ = [
    "DotPathError",
    "Page",
    "clamp_page",
    "lookup",
    "paginate",
    "resolve_dot_path",
    "total_pages",
]

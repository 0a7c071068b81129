# app/utils/paging.py
from __future__ import annotations

__all__ = [
    "page_to_offset",
    "has_next_page",
]


def page_to_offset(page: int, page_size: int) -> int:
    """Convert a 1-based page number into a row offset.

    No clamping: page <= 0 yields a negative offset, which the service
    rejects as invalid input instead of silently serving page 1.
    """
    return (page - 1) * page_size


def has_next_page(offset: int, limit: int, total: int) -> bool:
    return offset + limit < total

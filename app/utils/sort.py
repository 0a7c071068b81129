# app/utils/sort.py
from __future__ import annotations

from app.core.exceptions import InvalidSortError
from app.repositories.interfaces import SortDirection

__all__ = ["SORT_TOKENS", "resolve_sort_direction"]

SORT_TOKENS: frozenset[str] = frozenset({"", "asc", "desc"})


def resolve_sort_direction(token: str | None) -> SortDirection | None:
    """Turn the user-supplied sort token into a rating sort direction.

    - None / "" -> None (insertion order)
    - "asc" / "desc" -> rating ascending / descending
    - anything else raises InvalidSortError; tokens are matched exactly,
      so "DESC" or " asc" are rejected rather than guessed at.
    """
    if token is None or token == "":
        return None
    if token not in SORT_TOKENS:
        raise InvalidSortError(f"invalid sort parameter: {token!r} (expected 'asc' or 'desc')")
    return "asc" if token == "asc" else "desc"

"""Utilities to map repository rows into DTOs."""

from __future__ import annotations

from collections.abc import Iterable

from app.dto import UserDTO, UserPageDTO
from app.repositories.interfaces import UserRow
from app.utils.paging import has_next_page


def map_user(row: UserRow) -> UserDTO:
    return UserDTO(
        id=int(row.id),
        name=str(row.name),
        nickname=str(row.nickname),
        likes=int(row.likes),
        viewers=int(row.viewers),
        rating=float(row.rating or 0),
    )


def map_user_page(rows: Iterable[UserRow], total: int, *, limit: int, offset: int) -> UserPageDTO:
    return UserPageDTO(
        data=[map_user(row) for row in rows],
        total_count=total,
        limit=limit,
        offset=offset,
        has_more=has_next_page(offset, limit, total),
    )

"""SQLAlchemy implementation of the user repository."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import User
from app.repositories.interfaces import (
    ConstraintViolationError,
    DuplicateKeyError,
    SortDirection,
    UpdateGuard,
    UserRepository,
    UserRow,
)

UNIQUE_VIOLATION = "23505"
CHECK_VIOLATION = "23514"

_UPDATABLE_COLUMNS = frozenset({"name", "nickname", "likes", "viewers"})
_ROW_COLUMNS = (User.id, User.name, User.nickname, User.likes, User.viewers, User.rating)


def _sqlstate(exc: IntegrityError) -> str | None:
    orig = getattr(exc, "orig", None)
    for candidate in (orig, getattr(orig, "__cause__", None)):
        if candidate is None:
            continue
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return str(code)
    return None


def _raise_conflict(exc: IntegrityError) -> None:
    """Re-raise a driver IntegrityError as a repository conflict signal when recognised."""
    code = _sqlstate(exc)
    message = str(getattr(exc, "orig", exc)).lower()
    if code == UNIQUE_VIOLATION or (code is None and "unique" in message):
        raise DuplicateKeyError("nickname already exists") from exc
    if code == CHECK_VIOLATION or (code is None and "check" in message):
        raise ConstraintViolationError("user constraint violated") from exc


def _to_row(row) -> UserRow:  # type: ignore[no-untyped-def]
    return UserRow(
        id=int(row.id),
        name=row.name,
        nickname=row.nickname,
        likes=int(row.likes),
        viewers=int(row.viewers),
        rating=float(row.rating or 0),
    )


def _guard_clause(guard: UpdateGuard):  # type: ignore[no-untyped-def]
    column = getattr(User, guard.column)
    if guard.op == "<=":
        return column <= guard.bound
    return column >= guard.bound


class SqlAlchemyUserRepository(UserRepository):
    """Default SQLAlchemy-backed implementation; one statement per operation."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def insert(self, *, name: str, nickname: str, likes: int, viewers: int) -> UserRow:
        stmt = (
            insert(User)
            .values(name=name, nickname=nickname, likes=likes, viewers=viewers)
            .returning(*_ROW_COLUMNS)
        )
        try:
            result = await self._session.execute(stmt)
        except IntegrityError as exc:
            _raise_conflict(exc)
            raise
        return _to_row(result.one())

    async def partial_update(
        self,
        nickname: str,
        changes: Mapping[str, object],
        guards: Sequence[UpdateGuard] = (),
    ) -> int:
        unknown = set(changes) - _UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"columns cannot be updated: {sorted(unknown)}")
        if not changes:
            return 0

        stmt = (
            update(User)
            .where(User.nickname == nickname, *(_guard_clause(g) for g in guards))
            .values(**dict(changes))
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self._session.execute(stmt)
        except IntegrityError as exc:
            _raise_conflict(exc)
            raise
        return int(result.rowcount or 0)

    async def fetch_one(self, nickname: str) -> UserRow | None:
        result = await self._session.execute(
            select(*_ROW_COLUMNS).where(User.nickname == nickname)
        )
        row = result.first()
        return _to_row(row) if row is not None else None

    async def fetch_page(
        self,
        *,
        sort: SortDirection | None,
        limit: int,
        offset: int,
    ) -> tuple[list[UserRow], int]:
        total = await self._session.scalar(select(func.count()).select_from(User))

        stmt = select(*_ROW_COLUMNS)
        if sort == "desc":
            stmt = stmt.order_by(User.rating.desc(), User.id.asc())
        elif sort == "asc":
            stmt = stmt.order_by(User.rating.asc(), User.id.asc())
        else:
            stmt = stmt.order_by(User.id.asc())
        stmt = stmt.limit(limit).offset(offset)

        rows = await self._session.execute(stmt)
        return [_to_row(row) for row in rows.all()], int(total or 0)

    async def delete_one(self, nickname: str) -> int:
        result = await self._session.execute(
            delete(User)
            .where(User.nickname == nickname)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

"""Rated-user use cases: the only place user invariants are checked before a write.

Invariants enforced here (and again by store constraints):

- ``likes >= 0`` and ``viewers >= 0``
- ``likes <= viewers``
- ``nickname`` unique (detected through the repository conflict signal,
  never by a read-then-insert pre-check)
- ``rating`` is derived by the store and never written

Rules that depend on the current row (``likes`` against the stored
``viewers`` and vice versa, viewer monotonicity) are compiled into
``UpdateGuard`` conditions and applied in the same statement as the write.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, fields
from typing import Any, TypeVar

import structlog
from sqlalchemy.exc import DataError, DBAPIError, OperationalError, SQLAlchemyError

from app.core.exceptions import (
    ConflictError,
    DomainError,
    InfrastructureError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from app.dto import UserDTO, UserPageDTO
from app.dto.mappers import map_user, map_user_page
from app.infra.unit_of_work import UnitOfWork
from app.repositories.interfaces import (
    ConstraintViolationError,
    DuplicateKeyError,
    UpdateGuard,
    UserRow,
)
from app.utils.sort import resolve_sort_direction

UnitOfWorkFactory = Callable[[], UnitOfWork]
T = TypeVar("T")

# likes/viewers are INTEGER columns; LIMIT/OFFSET are bigint
MAX_COUNT = 2_147_483_647
MAX_ROW_OFFSET = 2**63 - 1

logger = structlog.get_logger(__name__)


class _Unset:
    """Marker for a patch field the client did not send."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class UserPatch:
    """Sparse update request.

    A field is either ``UNSET`` (left untouched) or carries a value. An
    explicit ``None`` counts as present, so it is rejected instead of being
    confused with an omitted field.
    """

    name: Any = UNSET
    nickname: Any = UNSET
    likes: Any = UNSET
    viewers: Any = UNSET

    @classmethod
    def from_mapping(cls, values: dict[str, Any]) -> UserPatch:
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in known})

    def present(self) -> dict[str, Any]:
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        return {k: v for k, v in values.items() if v is not UNSET}


def _require_text(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} cannot be empty")
    return value


def _require_count(value: Any, field: str) -> int:
    # bool is an int subclass; True/False are not counters
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer")
    if value < 0:
        raise ValidationError(f"{field} cannot be negative")
    if value > MAX_COUNT:
        raise ValidationError(f"{field} cannot exceed {MAX_COUNT}")
    return value


def _rejection_message(guard: UpdateGuard) -> str:
    if guard.column == "viewers" and guard.op == ">=":
        return "likes cannot be more than viewers"
    if guard.column == "likes":
        return "viewers cannot be less than likes"
    return "viewers cannot be less than previous value"


class UserService:
    """Create/list/read/update/delete for rated users.

    Holds no per-request state; one instance can serve concurrent requests.
    Every call runs in its own unit of work and is bounded by ``timeout``
    seconds. Nothing is retried here.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        *,
        viewers_monotonic: bool = True,
        timeout: float | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._viewers_monotonic = viewers_monotonic
        self._timeout = timeout

    async def create(self, *, name: Any, nickname: Any, likes: Any, viewers: Any) -> UserDTO:
        name = _require_text(name, "name")
        nickname = _require_text(nickname, "nickname")
        likes = _require_count(likes, "likes")
        viewers = _require_count(viewers, "viewers")
        if likes > viewers:
            raise ValidationError("likes cannot be more than viewers")

        async def _op() -> UserRow:
            async with self._uow_factory() as uow:
                return await uow.users.insert(
                    name=name, nickname=nickname, likes=likes, viewers=viewers
                )

        row = await self._run(_op, action="create", nickname=nickname)
        logger.info("user_created", user_id=row.id, nickname=row.nickname, rating=row.rating)
        return map_user(row)

    async def list(self, *, sort: str | None, limit: int, offset: int) -> UserPageDTO:
        direction = resolve_sort_direction(sort)
        if limit < 1:
            raise ValidationError("limit must be at least 1")
        if offset < 0:
            raise ValidationError("offset cannot be negative")
        if limit > MAX_ROW_OFFSET or offset > MAX_ROW_OFFSET:
            raise ValidationError("page is out of range")

        async def _op() -> tuple[list[UserRow], int]:
            async with self._uow_factory() as uow:
                return await uow.users.fetch_page(sort=direction, limit=limit, offset=offset)

        rows, total = await self._run(_op, action="list")
        return map_user_page(rows, total, limit=limit, offset=offset)

    async def get(self, nickname: Any) -> UserDTO:
        nickname = _require_text(nickname, "nickname")

        async def _op() -> UserRow | None:
            async with self._uow_factory() as uow:
                return await uow.users.fetch_one(nickname)

        row = await self._run(_op, action="get", nickname=nickname)
        if row is None:
            raise NotFoundError("user not found")
        return map_user(row)

    async def update(self, nickname: Any, patch: UserPatch) -> None:
        nickname = _require_text(nickname, "nickname")
        changes = patch.present()
        if not changes:
            raise ValidationError("at least one of name, nickname, likes, viewers is required")

        if "name" in changes:
            _require_text(changes["name"], "name")
        if "nickname" in changes:
            _require_text(changes["nickname"], "nickname")
        if "likes" in changes:
            _require_count(changes["likes"], "likes")
        if "viewers" in changes:
            _require_count(changes["viewers"], "viewers")

        guards = self._guards_for(changes)

        async def _op() -> None:
            async with self._uow_factory() as uow:
                affected = await uow.users.partial_update(nickname, changes, guards)
                if affected:
                    return
                current = await uow.users.fetch_one(nickname)
                if current is None:
                    raise NotFoundError("user not found")
                failed = next((g for g in guards if not g.holds_for(current)), None)
                message = _rejection_message(failed) if failed else "user cannot be updated"
                logger.info(
                    "user_update_rejected",
                    nickname=nickname,
                    fields=sorted(changes),
                    reason=message,
                )
                raise ValidationError(message)

        await self._run(_op, action="update", nickname=nickname)
        logger.info("user_updated", nickname=nickname, fields=sorted(changes))

    async def delete(self, nickname: Any) -> None:
        nickname = _require_text(nickname, "nickname")

        async def _op() -> int:
            async with self._uow_factory() as uow:
                return await uow.users.delete_one(nickname)

        affected = await self._run(_op, action="delete", nickname=nickname)
        if affected == 0:
            raise NotFoundError("user not found")
        logger.info("user_deleted", nickname=nickname)

    def _guards_for(self, changes: dict[str, Any]) -> list[UpdateGuard]:
        has_likes = "likes" in changes
        has_viewers = "viewers" in changes
        guards: list[UpdateGuard] = []

        # previous-value rule is reported before the likes rule
        if has_viewers and self._viewers_monotonic:
            guards.append(UpdateGuard("viewers", "<=", changes["viewers"]))

        if has_likes and has_viewers:
            if changes["likes"] > changes["viewers"]:
                raise ValidationError("likes cannot be more than viewers")
        elif has_likes:
            guards.append(UpdateGuard("viewers", ">=", changes["likes"]))
        elif has_viewers:
            guards.append(UpdateGuard("likes", "<=", changes["viewers"]))
        return guards

    async def _run(self, op: Callable[[], Awaitable[T]], *, action: str, **log_fields: Any) -> T:
        """Execute one unit of work, bounded by the timeout, with errors classified."""
        try:
            if self._timeout is None:
                return await op()
            return await asyncio.wait_for(op(), timeout=self._timeout)
        except DomainError:
            raise
        except DuplicateKeyError as exc:
            logger.info("user_conflict", action=action, **log_fields)
            raise ConflictError("nickname already exists") from exc
        except ConstraintViolationError as exc:
            raise ValidationError("likes cannot be more than viewers") from exc
        except DataError as exc:
            # value rejected by a column type (e.g. integer out of range)
            logger.info("store_rejected_value", action=action, **log_fields)
            raise ValidationError("value out of range") from exc
        except asyncio.TimeoutError as exc:
            logger.warning("store_timeout", action=action, timeout=self._timeout, **log_fields)
            raise InfrastructureError("database operation timed out") from exc
        except (OperationalError, DBAPIError) as exc:
            if exc.connection_invalidated or isinstance(exc, OperationalError):
                logger.error("store_unavailable", action=action, exc_info=True, **log_fields)
                raise InfrastructureError("database unavailable") from exc
            logger.error("store_error", action=action, exc_info=True, **log_fields)
            raise InternalError("internal error") from exc
        except SQLAlchemyError as exc:
            logger.error("store_error", action=action, exc_info=True, **log_fields)
            raise InternalError("internal error") from exc

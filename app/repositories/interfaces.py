"""Repository abstractions for the service layer."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Literal, Protocol

SortDirection = Literal["asc", "desc"]
GuardColumn = Literal["likes", "viewers"]
GuardOp = Literal["<=", ">="]


class RepositoryError(Exception):
    """Base class for conflict signals surfaced by repositories."""


class DuplicateKeyError(RepositoryError):
    """The store rejected a write because the nickname is already taken."""


class ConstraintViolationError(RepositoryError):
    """The store rejected a write through a check constraint."""


@dataclass
class UserRow:
    id: int
    name: str
    nickname: str
    likes: int
    viewers: int
    rating: float


@dataclass(frozen=True)
class UpdateGuard:
    """Condition on the current row that must hold for an update to apply.

    ``UpdateGuard("viewers", ">=", 12)`` renders as ``viewers >= 12`` in the
    ``WHERE`` clause of the same statement that performs the write, so the
    check and the write cannot interleave with a concurrent writer.
    """

    column: GuardColumn
    op: GuardOp
    bound: int

    def holds_for(self, row: UserRow) -> bool:
        current = getattr(row, self.column)
        if self.op == "<=":
            return current <= self.bound
        return current >= self.bound


class UserRepository(Protocol):
    """Persistence boundary for rated users, keyed by nickname."""

    async def insert(self, *, name: str, nickname: str, likes: int, viewers: int) -> UserRow: ...

    async def partial_update(
        self,
        nickname: str,
        changes: Mapping[str, object],
        guards: Sequence[UpdateGuard] = (),
    ) -> int: ...

    async def fetch_one(self, nickname: str) -> UserRow | None: ...

    async def fetch_page(
        self,
        *,
        sort: SortDirection | None,
        limit: int,
        offset: int,
    ) -> tuple[list[UserRow], int]: ...

    async def delete_one(self, nickname: str) -> int: ...

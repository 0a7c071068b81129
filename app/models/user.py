from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Column,
    Computed,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)

from app.models.base import Base

# Kept in sync with migrations/versions/1c2d3e4f5a6b_create_users_table.py
RATING_EXPRESSION = "CASE WHEN viewers > 0 THEN ROUND(likes * 1.0 / viewers, 3) ELSE 0 END"


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("nickname", name="uq_users_nickname"),
        CheckConstraint("likes >= 0", name="ck_users_likes_non_negative"),
        CheckConstraint("viewers >= 0", name="ck_users_viewers_non_negative"),
        CheckConstraint("likes <= viewers", name="ck_users_likes_lte_viewers"),
        Index("ix_users_rating_id", "rating", "id"),
    )

    # SQLite only autoincrements INTEGER PRIMARY KEY
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True)
    name = Column(String, nullable=False)
    nickname = Column(String, nullable=False)  # external lookup key
    likes = Column(Integer, nullable=False, default=0, server_default="0")
    viewers = Column(Integer, nullable=False, default=0, server_default="0")
    # Derived by the store, never written by the application
    rating = Column(
        Numeric(10, 3, asdecimal=False),
        Computed(RATING_EXPRESSION, persisted=True),
        nullable=False,
    )

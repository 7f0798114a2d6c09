"""
SQLAlchemy ORM models for persistent storage.

A binder row stores its settings and sparse card map as JSON documents in
the same shape as exported snapshots (camelCase, decimal-string positions).
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class BinderDB(Base):
    """
    A user's binder stored in the database.

    Each binder belongs to one owner; card slots are kept as one JSON map
    keyed by global position.
    """

    __tablename__ = "binders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    binder_id: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    owner_id: Mapped[str] = mapped_column(String(255), index=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text, default="")
    is_public: Mapped[bool] = mapped_column(Boolean, default=False)

    settings: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    cards: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<BinderDB(binder_id={self.binder_id}, owner_id={self.owner_id})>"

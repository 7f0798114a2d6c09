"""
Database CRUD operations.

Provides async functions for creating, reading, updating, and deleting
binders, and for converting rows to domain snapshots.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pokebinder.models.binder import BinderSettings, BinderSnapshot, parse_snapshot
from pokebinder.models.db import BinderDB
from pokebinder.models.failure import BinderNotFoundError


async def create_binder(
    session: AsyncSession,
    owner_id: str,
    name: str,
    *,
    description: str = "",
    settings: BinderSettings | None = None,
    is_public: bool = False,
) -> BinderDB:
    """Create an empty binder for a user."""
    settings = settings or BinderSettings()
    binder = BinderDB(
        binder_id=uuid.uuid4().hex,
        owner_id=owner_id,
        name=name,
        description=description,
        is_public=is_public,
        settings=settings.model_dump(mode="json", by_alias=True),
        cards={},
    )
    session.add(binder)
    await session.flush()
    return binder


async def get_binder(session: AsyncSession, binder_id: str) -> BinderDB | None:
    """
    Get a binder by its public id.

    Returns None if no binder exists with this id.
    """
    result = await session.execute(select(BinderDB).where(BinderDB.binder_id == binder_id))
    return result.scalar_one_or_none()


async def get_binder_or_fail(session: AsyncSession, binder_id: str) -> BinderDB:
    """
    Get a binder by id.

    Raises:
        BinderNotFoundError: If the binder does not exist
    """
    binder = await get_binder(session, binder_id)
    if binder is None:
        raise BinderNotFoundError(binder_id)
    return binder


async def list_binders(session: AsyncSession, owner_id: str) -> list[BinderDB]:
    """Get all binders of a user, oldest first."""
    result = await session.execute(
        select(BinderDB).where(BinderDB.owner_id == owner_id).order_by(BinderDB.id)
    )
    return list(result.scalars().all())


async def list_public_binders(session: AsyncSession) -> list[BinderDB]:
    """Get every binder flagged for static export."""
    result = await session.execute(
        select(BinderDB).where(BinderDB.is_public.is_(True)).order_by(BinderDB.id)
    )
    return list(result.scalars().all())


async def save_snapshot(
    session: AsyncSession,
    binder: BinderDB,
    snapshot: BinderSnapshot,
) -> BinderDB:
    """
    Persist a binder's settings and cards.

    The JSON columns are replaced wholesale; the last saved snapshot wins.
    """
    payload = snapshot.to_payload()
    binder.settings = payload["settings"]
    binder.cards = payload["cards"]
    await session.flush()
    return binder


def binder_to_snapshot(binder: BinderDB) -> BinderSnapshot:
    """
    Convert a database binder to a domain snapshot.

    Raises:
        MalformedSnapshotError: If the stored JSON is invalid
    """
    return parse_snapshot({"settings": binder.settings, "cards": binder.cards})


async def delete_binder(session: AsyncSession, binder_id: str) -> bool:
    """
    Delete a binder.

    Returns True if deleted, False if not found.
    """
    binder = await get_binder(session, binder_id)
    if not binder:
        return False

    await session.delete(binder)
    return True

"""Tests for database CRUD operations."""

import pytest
from factories import make_snapshot
from sqlalchemy.ext.asyncio import AsyncSession

from pokebinder.db.operations import (
    binder_to_snapshot,
    create_binder,
    delete_binder,
    get_binder,
    get_binder_or_fail,
    list_binders,
    list_public_binders,
    save_snapshot,
)
from pokebinder.models.binder import BinderSettings
from pokebinder.models.failure import BinderNotFoundError, MalformedSnapshotError


class TestBinderOperations:
    async def test_create_binder(self, session: AsyncSession) -> None:
        """New binders start empty with default settings."""
        binder = await create_binder(session, "user-123", "Vintage")

        assert binder.id is not None
        assert len(binder.binder_id) == 32
        assert binder.owner_id == "user-123"
        assert binder.cards == {}
        assert binder.settings["gridSize"] == "3x3"
        assert binder.settings["maxPages"] == 100

    async def test_create_with_settings(self, session: AsyncSession) -> None:
        binder = await create_binder(
            session, "user-123", "Modern", settings=BinderSettings(grid_size="4x4"), is_public=True
        )

        assert binder.settings["gridSize"] == "4x4"
        assert binder.is_public is True

    async def test_get_binder(self, session: AsyncSession) -> None:
        created = await create_binder(session, "user-123", "Vintage")
        await session.commit()

        binder = await get_binder(session, created.binder_id)

        assert binder is not None
        assert binder.name == "Vintage"

    async def test_get_missing_binder(self, session: AsyncSession) -> None:
        assert await get_binder(session, "nope") is None

    async def test_get_binder_or_fail(self, session: AsyncSession) -> None:
        with pytest.raises(BinderNotFoundError) as exc_info:
            await get_binder_or_fail(session, "nope")

        assert exc_info.value.status_code == 404

    async def test_list_binders(self, session: AsyncSession) -> None:
        await create_binder(session, "user-1", "First")
        await create_binder(session, "user-1", "Second")
        await create_binder(session, "user-2", "Other")
        await session.commit()

        binders = await list_binders(session, "user-1")

        assert [b.name for b in binders] == ["First", "Second"]

    async def test_list_public_binders(self, session: AsyncSession) -> None:
        await create_binder(session, "user-1", "Private")
        await create_binder(session, "user-1", "Public", is_public=True)
        await session.commit()

        binders = await list_public_binders(session)

        assert [b.name for b in binders] == ["Public"]

    async def test_save_and_load_snapshot(self, session: AsyncSession) -> None:
        binder = await create_binder(session, "user-1", "Cards")
        snapshot = make_snapshot([0, 12], grid_size="2x2", page_count=4)

        await save_snapshot(session, binder, snapshot)
        await session.commit()

        loaded = await get_binder(session, binder.binder_id)
        assert loaded is not None
        assert set(loaded.cards) == {"0", "12"}
        assert binder_to_snapshot(loaded) == snapshot

    async def test_corrupt_row_fails_to_load(self, session: AsyncSession) -> None:
        binder = await create_binder(session, "user-1", "Broken")
        binder.cards = {"zero": {}}

        with pytest.raises(MalformedSnapshotError):
            binder_to_snapshot(binder)

    async def test_delete_binder(self, session: AsyncSession) -> None:
        created = await create_binder(session, "user-1", "Gone")
        await session.commit()

        assert await delete_binder(session, created.binder_id) is True
        await session.commit()

        assert await get_binder(session, created.binder_id) is None

    async def test_delete_missing_binder(self, session: AsyncSession) -> None:
        assert await delete_binder(session, "nope") is False

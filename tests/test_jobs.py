"""Tests for the static binder export job."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from factories import make_snapshot

from pokebinder.jobs.export_static_binders import run_export


def _row(binder_id: str, name: str, snapshot=None, **fields) -> MagicMock:
    payload = (snapshot or make_snapshot([0])).to_payload()
    row = MagicMock()
    row.binder_id = binder_id
    row.name = name
    row.description = fields.get("description", "")
    row.settings = fields.get("settings", payload["settings"])
    row.cards = fields.get("cards", payload["cards"])
    return row


@pytest.fixture
def mock_session() -> AsyncMock:
    session = AsyncMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=None)
    return session


class TestRunExport:
    @pytest.mark.asyncio
    async def test_exports_public_binders(self, tmp_path: Path, mock_session: AsyncMock):
        """Each public binder becomes a JSON file listed in the index."""
        rows = [
            _row("a" * 32, "Base Set Holos", make_snapshot([0, 1])),
            _row("b" * 32, "Jungle"),
        ]

        with (
            patch(
                "pokebinder.jobs.export_static_binders.async_session_factory",
                return_value=mock_session,
            ),
            patch(
                "pokebinder.jobs.export_static_binders.list_public_binders",
                new_callable=AsyncMock,
                return_value=rows,
            ),
        ):
            slugs = await run_export(tmp_path)

        assert slugs == ["base-set-holos", "jungle"]
        document = json.loads((tmp_path / "base-set-holos.json").read_text())
        assert document["metadata"]["statistics"]["cardCount"] == 2
        index = json.loads((tmp_path / "index.json").read_text())
        assert len(index["binders"]) == 2

    @pytest.mark.asyncio
    async def test_duplicate_names_get_distinct_slugs(
        self, tmp_path: Path, mock_session: AsyncMock
    ):
        """Binders sharing a name do not overwrite each other."""
        rows = [_row("1234567890abcdef", "Favourites"), _row("fedcba0987654321", "Favourites")]

        with (
            patch(
                "pokebinder.jobs.export_static_binders.async_session_factory",
                return_value=mock_session,
            ),
            patch(
                "pokebinder.jobs.export_static_binders.list_public_binders",
                new_callable=AsyncMock,
                return_value=rows,
            ),
        ):
            slugs = await run_export(tmp_path)

        assert slugs == ["favourites", "favourites-fedcba09"]

    @pytest.mark.asyncio
    async def test_binder_named_index_keeps_its_file(
        self, tmp_path: Path, mock_session: AsyncMock
    ):
        """A binder named "Index" does not overwrite the index file."""
        rows = [_row("1234567890abcdef", "Index", make_snapshot([0, 5]))]

        with (
            patch(
                "pokebinder.jobs.export_static_binders.async_session_factory",
                return_value=mock_session,
            ),
            patch(
                "pokebinder.jobs.export_static_binders.list_public_binders",
                new_callable=AsyncMock,
                return_value=rows,
            ),
        ):
            slugs = await run_export(tmp_path)

        assert slugs == ["index-12345678"]
        document = json.loads((tmp_path / "index-12345678.json").read_text())
        assert set(document["cards"]) == {"0", "5"}
        index = json.loads((tmp_path / "index.json").read_text())
        assert index["binders"][0]["slug"] == "index-12345678"

    @pytest.mark.asyncio
    async def test_skips_invalid_binders(self, tmp_path: Path, mock_session: AsyncMock):
        """Rows whose stored snapshot no longer validates are skipped."""
        rows = [
            _row("a" * 32, "Broken", settings={"gridSize": "7x7"}),
            _row("b" * 32, "Fine"),
        ]

        with (
            patch(
                "pokebinder.jobs.export_static_binders.async_session_factory",
                return_value=mock_session,
            ),
            patch(
                "pokebinder.jobs.export_static_binders.list_public_binders",
                new_callable=AsyncMock,
                return_value=rows,
            ),
        ):
            slugs = await run_export(tmp_path)

        assert slugs == ["fine"]
        assert not (tmp_path / "broken.json").exists()

    @pytest.mark.asyncio
    async def test_no_public_binders(self, tmp_path: Path, mock_session: AsyncMock):
        """An empty export still writes an index."""
        with (
            patch(
                "pokebinder.jobs.export_static_binders.async_session_factory",
                return_value=mock_session,
            ),
            patch(
                "pokebinder.jobs.export_static_binders.list_public_binders",
                new_callable=AsyncMock,
                return_value=[],
            ),
        ):
            slugs = await run_export(tmp_path)

        assert slugs == []
        assert json.loads((tmp_path / "index.json").read_text())["binders"] == []

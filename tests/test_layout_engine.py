"""Tests for the binder layout facade."""

import pytest
from factories import make_snapshot

from pokebinder.layout.engine import BinderLayout
from pokebinder.layout.spread import PageType
from pokebinder.models.failure import ConfigurationError, MalformedSnapshotError


class TestBinderLayout:
    def test_empty_default_binder(self) -> None:
        layout = BinderLayout(make_snapshot())

        assert layout.total_pages == 1
        assert layout.total_single_pages == 1
        spread = layout.resolve_spread(0)
        assert spread.left_page.type is PageType.COVER
        assert spread.right_page is not None
        assert spread.right_page.card_page_index == 0
        assert layout.extract_page(0) == [None] * 9

    def test_card_at_position_ten(self) -> None:
        layout = BinderLayout(make_snapshot([10]))

        assert layout.total_pages == 2
        assert layout.total_single_pages == 3
        page = layout.extract_page(1)
        assert page[1] is not None
        assert page[1]["id"] == "card-10"

    def test_2x2_first_slot(self) -> None:
        layout = BinderLayout(make_snapshot([0], grid_size="2x2"))

        assert layout.grid.total == 4
        assert layout.extract_page(0)[0] is not None
        assert layout.resolve_spread(0).right_page.card_page_index == 0

    def test_spread_view_collects_both_pages(self) -> None:
        layout = BinderLayout(make_snapshot([9, 18]))

        view = layout.spread_view(1)

        assert sorted(view.pages) == [1, 2]
        assert view.pages[1][0]["id"] == "card-9"
        assert view.pages[2][0]["id"] == "card-18"

    def test_cover_spread_view(self) -> None:
        view = BinderLayout(make_snapshot([0])).spread_view(0)
        assert list(view.pages) == [0]

    def test_single_page_view(self) -> None:
        layout = BinderLayout(make_snapshot([9]))

        cover = layout.single_page_view(0)
        second = layout.single_page_view(2)

        assert cover.pages == {}
        assert second.pages[1][0]["id"] == "card-9"

    def test_custom_page_order(self) -> None:
        layout = BinderLayout(make_snapshot([9, 30], page_order=[0, 2, 1]))

        assert layout.resolve_spread(1).card_page_indices == [3, 4]
        assert layout.resolve_spread(2).card_page_indices == [1, 2]

    def test_unreachable_positions_when_clamped(self) -> None:
        layout = BinderLayout(make_snapshot([0, 8, 9, 30], max_pages=1))

        assert layout.total_pages == 1
        assert layout.unreachable_positions() == [9, 30]

    def test_unreachable_positions_follow_page_order(self) -> None:
        # Spread 1 is skipped: navigation shows spreads 0 and 2 only
        layout = BinderLayout(make_snapshot([0, 9, 30], max_pages=2, page_order=[0, 2]))

        assert layout.total_pages == 2
        assert layout.unreachable_positions() == [9]

    def test_no_unreachable_positions_normally(self) -> None:
        layout = BinderLayout(make_snapshot([0, 8, 9, 30]))

        assert layout.total_pages == 3
        assert layout.unreachable_positions() == []

    def test_layout_does_not_mutate_snapshot(self) -> None:
        snapshot = make_snapshot([4])
        before = snapshot.model_dump()

        layout = BinderLayout(snapshot)
        layout.spread_view(0)
        layout.unreachable_positions()

        assert snapshot.model_dump() == before


class TestFromPayload:
    def test_builds_from_snapshot_json(self) -> None:
        layout = BinderLayout.from_payload(
            {
                "settings": {"gridSize": "4x4", "pageCount": 1},
                "cards": {
                    "17": {
                        "cardData": {"id": "sv1-1", "name": "Sprigatito"},
                        "instanceId": "i1",
                    }
                },
            }
        )

        assert layout.grid.total == 16
        assert layout.total_pages == 2
        assert layout.extract_page(1)[1]["name"] == "Sprigatito"

    def test_missing_settings_fails_fast(self) -> None:
        with pytest.raises(MalformedSnapshotError):
            BinderLayout.from_payload({"cards": {}})

    def test_unknown_grid_fails(self) -> None:
        with pytest.raises(ConfigurationError):
            BinderLayout.from_payload({"settings": {"gridSize": "7x7"}, "cards": {}})

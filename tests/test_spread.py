"""Tests for spread resolution."""

import pytest

from pokebinder.layout.spread import (
    PageSide,
    PageType,
    Spread,
    SpreadType,
    page_label,
    physical_page_index,
    resolve_single_page,
    resolve_spread,
)


class TestResolveSpread:
    def test_first_spread_is_cover_and_first_page(self) -> None:
        spread = resolve_spread(0)

        assert spread.type is SpreadType.COVER_AND_FIRST
        assert spread.left_page == PageSide(type=PageType.COVER)
        assert spread.right_page == PageSide(
            type=PageType.CARDS, page_number=1, card_page_index=0
        )

    def test_second_spread(self) -> None:
        spread = resolve_spread(1)

        assert spread.type is SpreadType.CARDS_PAIR
        assert spread.left_page.card_page_index == 1
        assert spread.right_page is not None
        assert spread.right_page.card_page_index == 2

    @pytest.mark.parametrize("index", range(1, 60))
    def test_right_follows_left(self, index: int) -> None:
        spread = resolve_spread(index)

        assert spread.right_page is not None
        assert spread.left_page.card_page_index == (index - 1) * 2 + 1
        assert spread.right_page.card_page_index == spread.left_page.card_page_index + 1

    @pytest.mark.parametrize("index", range(0, 20))
    def test_page_numbers_are_one_based(self, index: int) -> None:
        spread = resolve_spread(index)
        for side in (spread.left_page, spread.right_page):
            assert side is not None
            if side.type is PageType.CARDS:
                assert side.page_number == side.card_page_index + 1

    def test_no_bounds_checking(self) -> None:
        """Any index resolves; callers guard against the page count."""
        spread = resolve_spread(500)
        assert spread.left_page.card_page_index == 999

    def test_card_page_indices(self) -> None:
        assert resolve_spread(0).card_page_indices == [0]
        assert resolve_spread(2).card_page_indices == [3, 4]


class TestResolveSinglePage:
    def test_cover(self) -> None:
        spread = resolve_single_page(0)

        assert spread.type is SpreadType.COVER_SINGLE
        assert spread.left_page.type is PageType.COVER
        assert spread.right_page is None
        assert spread.card_page_indices == []

    def test_card_page(self) -> None:
        spread = resolve_single_page(3)

        assert spread.type is SpreadType.CARDS_SINGLE
        assert spread.left_page.card_page_index == 2
        assert spread.left_page.page_number == 3


class TestPhysicalPageIndex:
    def test_sequential_without_order(self) -> None:
        assert physical_page_index(4, None) == 4
        assert physical_page_index(4, []) == 4

    def test_custom_order(self) -> None:
        order = [0, 2, 1]
        assert [physical_page_index(i, order) for i in range(3)] == [0, 2, 1]

    def test_index_beyond_order_is_sequential(self) -> None:
        assert physical_page_index(5, [0, 2, 1]) == 5

    def test_negative_entry_is_ignored(self) -> None:
        assert physical_page_index(1, [0, -1]) == 1


class TestPageLabel:
    def test_labels(self) -> None:
        assert page_label(resolve_spread(0)) == "Cover - Page 1"
        assert page_label(resolve_spread(1)) == "Pages 2-3"
        assert page_label(resolve_spread(3)) == "Pages 6-7"
        assert page_label(resolve_single_page(0)) == "Cover"
        assert page_label(resolve_single_page(4)) == "Page 4"

    def test_label_of_pair_with_single_side(self) -> None:
        spread = Spread(type=SpreadType.CARDS_PAIR, left_page=PageSide.cards(5))
        assert page_label(spread) == "Pages 6-6"

"""
Spread resolver.

Translates a navigation index into the pages shown side by side. No bounds
checking against the binder's page count happens here; callers guard the
index (see PageNavigator).
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum


class PageType(str, Enum):
    """What occupies one side of a spread."""

    COVER = "cover"
    CARDS = "cards"


class SpreadType(str, Enum):
    """Shape of a rendered view."""

    COVER_AND_FIRST = "cover-and-first"
    CARDS_PAIR = "cards-pair"
    COVER_SINGLE = "cover-single"
    CARDS_SINGLE = "cards-single"


@dataclass(frozen=True, slots=True)
class PageSide:
    """
    One side of a spread.

    Attributes:
        type: Cover or card page
        page_number: 1-based display number (None for the cover)
        card_page_index: 0-based logical card page (None for the cover)
    """

    type: PageType
    page_number: int | None = None
    card_page_index: int | None = None

    @classmethod
    def cover(cls) -> "PageSide":
        return cls(type=PageType.COVER)

    @classmethod
    def cards(cls, card_page_index: int) -> "PageSide":
        return cls(
            type=PageType.CARDS,
            page_number=card_page_index + 1,
            card_page_index=card_page_index,
        )


@dataclass(frozen=True, slots=True)
class Spread:
    """A view: two sides in book mode, a single left side in single-page mode."""

    type: SpreadType
    left_page: PageSide
    right_page: PageSide | None = None

    @property
    def card_page_indices(self) -> list[int]:
        """Logical card pages visible in this view, left to right."""
        sides = [self.left_page, self.right_page]
        return [s.card_page_index for s in sides if s is not None and s.card_page_index is not None]


def resolve_spread(physical_page_index: int) -> Spread:
    """
    Resolve a physical page index into its left and right sides.

    Page 0 is the cover next to card page 0. Page n > 0 shows card pages
    (n - 1) * 2 + 1 and (n - 1) * 2 + 2.
    """
    if physical_page_index == 0:
        return Spread(
            type=SpreadType.COVER_AND_FIRST,
            left_page=PageSide.cover(),
            right_page=PageSide.cards(0),
        )

    left = (physical_page_index - 1) * 2 + 1
    return Spread(
        type=SpreadType.CARDS_PAIR,
        left_page=PageSide.cards(left),
        right_page=PageSide.cards(left + 1),
    )


def resolve_single_page(view_index: int) -> Spread:
    """Resolve a single-page (mobile) view: 0 is the cover, n is card page n - 1."""
    if view_index == 0:
        return Spread(type=SpreadType.COVER_SINGLE, left_page=PageSide.cover())
    return Spread(type=SpreadType.CARDS_SINGLE, left_page=PageSide.cards(view_index - 1))


def physical_page_index(navigation_index: int, page_order: Sequence[int] | None) -> int:
    """
    Map a navigation index to a physical page through a custom page order.

    Without an order, or when the order has no usable entry for the index,
    pages are sequential.
    """
    if not page_order or not 0 <= navigation_index < len(page_order):
        return navigation_index
    mapped = page_order[navigation_index]
    return mapped if mapped >= 0 else navigation_index


def page_label(spread: Spread) -> str:
    """Human readable label for a view, e.g. "Cover - Page 1" or "Pages 2-3"."""
    if spread.type is SpreadType.COVER_AND_FIRST:
        return "Cover - Page 1"
    if spread.type is SpreadType.COVER_SINGLE:
        return "Cover"
    if spread.type is SpreadType.CARDS_SINGLE:
        return f"Page {spread.left_page.page_number}"
    indices = spread.card_page_indices
    return f"Pages {indices[0] + 1}-{indices[-1] + 1}"

"""
Page count calculator.

A binder is shown as spreads (physical pages). The first spread pairs the
cover with card page 0; every later spread shows two card pages side by side.
The number of spreads is the largest of the author-declared page count, the
spreads needed to reach the highest occupied slot, and the configured
minimum, clamped to the configured maximum.

The clamp can hide occupied slots: when maxPages is smaller than the spreads
the cards need, the extra cards are unreachable through navigation. The
clamped value is still returned and a warning is logged.
"""

import logging
import math
from collections.abc import Iterable
from typing import Protocol

logger = logging.getLogger(__name__)


class PageBounds(Protocol):
    """The page-related settings the calculator reads."""

    page_count: int
    min_pages: int
    max_pages: int


def required_card_pages(max_position: int, grid_total: int) -> int:
    """Number of logical card pages needed to contain `max_position`."""
    return math.ceil((max_position + 1) / grid_total)


def card_pages_to_spreads(card_pages: int) -> int:
    """
    Convert a logical card-page count into spreads.

    Spread 0 holds the cover and card page 0, the remaining card pages are
    paired two per spread.
    """
    if card_pages <= 1:
        return 1
    return 1 + math.ceil((card_pages - 1) / 2)


def compute_page_count(
    card_positions: Iterable[int],
    grid_total: int,
    settings: PageBounds,
) -> int:
    """
    Compute the number of spreads a binder navigates over.

    Args:
        card_positions: Occupied global slot positions
        grid_total: Card slots per logical page
        settings: Declared page count and min/max bounds

    Returns:
        max(page_count, required spreads, min_pages) clamped to max_pages
    """
    positions = list(card_positions)

    if not positions:
        return max(settings.page_count, settings.min_pages)

    required_spreads = card_pages_to_spreads(required_card_pages(max(positions), grid_total))
    result = max(settings.page_count, required_spreads, settings.min_pages)

    if required_spreads > settings.max_pages:
        logger.warning(
            "PAGE_COUNT_CLAMPED",
            extra={
                "required_spreads": required_spreads,
                "max_pages": settings.max_pages,
                "max_position": max(positions),
            },
        )

    return min(result, settings.max_pages)


def compute_single_page_count(card_positions: Iterable[int], grid_total: int) -> int:
    """
    Compute the number of views in single-page mode.

    Every card page is its own view, preceded by the cover.
    """
    positions = list(card_positions)
    if not positions:
        return 1
    return 1 + required_card_pages(max(positions), grid_total)

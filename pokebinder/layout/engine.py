"""
Binder layout facade.

Binds the pure layout functions to one binder snapshot so the rendering
layer gets page counts, spreads and card slices from a single object. The
layout never mutates the snapshot.
"""

from dataclasses import dataclass
from functools import cached_property
from typing import Any

from pokebinder.layout.grid import GridConfig, resolve_grid
from pokebinder.layout.pages import compute_page_count, compute_single_page_count
from pokebinder.layout.slices import RenderedCard, extract_page
from pokebinder.layout.spread import (
    Spread,
    physical_page_index,
    resolve_single_page,
    resolve_spread,
)
from pokebinder.models.binder import BinderSnapshot, parse_snapshot


@dataclass(frozen=True)
class SpreadView:
    """A resolved spread together with the cards of each visible card page."""

    index: int
    spread: Spread
    pages: dict[int, list[RenderedCard | None]]


class BinderLayout:
    """Layout of one binder snapshot."""

    def __init__(self, snapshot: BinderSnapshot):
        self.snapshot = snapshot

    @classmethod
    def from_payload(cls, payload: Any) -> "BinderLayout":
        """Build a layout from raw snapshot JSON."""
        return cls(parse_snapshot(payload))

    @cached_property
    def grid(self) -> GridConfig:
        return resolve_grid(self.snapshot.settings.grid_size)

    @cached_property
    def total_pages(self) -> int:
        """Number of spreads the binder can be navigated across."""
        return compute_page_count(self.snapshot.cards, self.grid.total, self.snapshot.settings)

    @cached_property
    def total_single_pages(self) -> int:
        """Number of views in single-page mode (cover + card pages)."""
        return compute_single_page_count(self.snapshot.cards, self.grid.total)

    def resolve_spread(self, index: int) -> Spread:
        """Resolve a navigation index, honouring a custom page order."""
        return resolve_spread(physical_page_index(index, self.snapshot.settings.page_order))

    def extract_page(self, card_page_index: int) -> list[RenderedCard | None]:
        return extract_page(self.snapshot.cards, card_page_index, self.grid.total)

    def spread_view(self, index: int) -> SpreadView:
        spread = self.resolve_spread(index)
        return self._view(index, spread)

    def single_page_view(self, index: int) -> SpreadView:
        return self._view(index, resolve_single_page(index))

    def _view(self, index: int, spread: Spread) -> SpreadView:
        pages = {i: self.extract_page(i) for i in spread.card_page_indices}
        return SpreadView(index=index, spread=spread, pages=pages)

    def unreachable_positions(self) -> list[int]:
        """
        Occupied positions that no navigable spread shows.

        Non-empty when maxPages clamps the page count below what the cards
        need, or when a custom page order skips some spreads.
        """
        visible = {
            page
            for index in range(self.total_pages)
            for page in self.resolve_spread(index).card_page_indices
        }
        return [pos for pos in self.snapshot.positions if pos // self.grid.total not in visible]

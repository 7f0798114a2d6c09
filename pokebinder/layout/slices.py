"""
Card slice extractor.

Pulls the slots of one logical card page out of the sparse card map. Card
page n covers global positions [n * grid_total, (n + 1) * grid_total).
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pokebinder.models.binder import CardEntry

RenderedCard = dict[str, Any]


def page_positions(card_page_index: int, grid_total: int) -> range:
    """Global slot positions covered by a logical card page."""
    start = card_page_index * grid_total
    return range(start, start + grid_total)


def project_card(entry: CardEntry) -> RenderedCard:
    """
    Flatten a card entry into the rendering shape.

    Catalog fields sit at the top level, slot metadata under `binderMetadata`.
    """
    rendered: RenderedCard = entry.card_data.model_dump(mode="json", by_alias=True)
    rendered["binderMetadata"] = entry.binder_metadata()
    return rendered


def iter_page(
    card_map: Mapping[int, CardEntry],
    card_page_index: int,
    grid_total: int,
) -> Iterator[RenderedCard | None]:
    """Yield each slot of a card page in order: a rendered card or None."""
    for position in page_positions(card_page_index, grid_total):
        entry = card_map.get(position)
        yield project_card(entry) if entry is not None else None


def extract_page(
    card_map: Mapping[int, CardEntry],
    card_page_index: int,
    grid_total: int,
) -> list[RenderedCard | None]:
    """
    Extract one logical card page.

    Returns exactly `grid_total` slots; empty slots are None.
    """
    return list(iter_page(card_map, card_page_index, grid_total))

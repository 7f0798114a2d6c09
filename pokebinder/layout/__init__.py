from pokebinder.layout.grid import (
    DEFAULT_GRID_SIZE,
    GRID_CONFIGS,
    GridConfig,
    is_supported_grid,
    resolve_grid,
)
from pokebinder.layout.navigator import PageNavigator
from pokebinder.layout.pages import (
    card_pages_to_spreads,
    compute_page_count,
    compute_single_page_count,
    required_card_pages,
)
from pokebinder.layout.slices import extract_page, iter_page, page_positions, project_card
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

__all__ = [
    "DEFAULT_GRID_SIZE",
    "GRID_CONFIGS",
    "GridConfig",
    "PageNavigator",
    "PageSide",
    "PageType",
    "Spread",
    "SpreadType",
    "card_pages_to_spreads",
    "compute_page_count",
    "compute_single_page_count",
    "extract_page",
    "is_supported_grid",
    "iter_page",
    "page_label",
    "page_positions",
    "physical_page_index",
    "project_card",
    "required_card_pages",
    "resolve_grid",
    "resolve_single_page",
    "resolve_spread",
]

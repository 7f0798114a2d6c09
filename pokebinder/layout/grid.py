"""
Grid configuration resolver.

Maps a grid-size token such as "3x3" to its rows, columns and slot count.
Tokens read "{columns}x{rows}", so "4x3" is four columns by three rows.

Unsupported tokens are always rejected with ConfigurationError; no call site
falls back to the default grid.
"""

from dataclasses import dataclass

from pokebinder.models.failure import ConfigurationError

DEFAULT_GRID_SIZE = "3x3"


@dataclass(frozen=True, slots=True)
class GridConfig:
    """
    Layout of one logical card page.

    Attributes:
        token: Grid-size token this config was resolved from
        rows: Card rows per page
        columns: Card columns per page
        total: Card slots per page (rows * columns)
    """

    token: str
    rows: int
    columns: int

    @property
    def total(self) -> int:
        return self.rows * self.columns


GRID_CONFIGS: dict[str, GridConfig] = {
    "2x2": GridConfig(token="2x2", rows=2, columns=2),
    "3x3": GridConfig(token="3x3", rows=3, columns=3),
    "3x4": GridConfig(token="3x4", rows=4, columns=3),
    "4x3": GridConfig(token="4x3", rows=3, columns=4),
    "4x4": GridConfig(token="4x4", rows=4, columns=4),
}


def is_supported_grid(token: object) -> bool:
    """Check whether a value names a supported grid size."""
    return isinstance(token, str) and token in GRID_CONFIGS


def resolve_grid(token: str) -> GridConfig:
    """
    Resolve a grid-size token to its configuration.

    Raises:
        ConfigurationError: If the token is not a supported grid size
    """
    if not is_supported_grid(token):
        supported = ", ".join(sorted(GRID_CONFIGS))
        raise ConfigurationError(
            f"Unsupported grid size: {token!r}",
            detail=f"Supported grid sizes: {supported}",
        )
    return GRID_CONFIGS[token]

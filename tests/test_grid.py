"""Tests for grid configuration resolution."""

import pytest

from pokebinder.layout.grid import (
    DEFAULT_GRID_SIZE,
    GRID_CONFIGS,
    is_supported_grid,
    resolve_grid,
)
from pokebinder.models.failure import ConfigurationError, FailureKind


class TestResolveGrid:
    @pytest.mark.parametrize(
        ("token", "rows", "columns", "total"),
        [
            ("2x2", 2, 2, 4),
            ("3x3", 3, 3, 9),
            ("3x4", 4, 3, 12),
            ("4x3", 3, 4, 12),
            ("4x4", 4, 4, 16),
        ],
    )
    def test_supported_tokens(self, token: str, rows: int, columns: int, total: int) -> None:
        """Each token resolves to its rows, columns and slot count."""
        grid = resolve_grid(token)

        assert grid.rows == rows
        assert grid.columns == columns
        assert grid.total == total

    @pytest.mark.parametrize("token", sorted(GRID_CONFIGS))
    def test_total_is_rows_times_columns(self, token: str) -> None:
        grid = resolve_grid(token)

        assert grid.total == grid.rows * grid.columns
        assert 4 <= grid.total <= 16

    @pytest.mark.parametrize("token", sorted(GRID_CONFIGS))
    def test_resolution_is_deterministic(self, token: str) -> None:
        assert resolve_grid(token) == resolve_grid(token)

    def test_default_grid_is_3x3(self) -> None:
        assert DEFAULT_GRID_SIZE == "3x3"
        assert resolve_grid(DEFAULT_GRID_SIZE).total == 9

    @pytest.mark.parametrize("token", ["5x5", "1x1", "3X3", "", "three"])
    def test_unsupported_token_raises(self, token: str) -> None:
        """Unsupported tokens are rejected, never silently defaulted."""
        with pytest.raises(ConfigurationError) as exc_info:
            resolve_grid(token)

        assert exc_info.value.kind == FailureKind.CONFIGURATION
        assert exc_info.value.status_code == 400
        assert "3x3" in (exc_info.value.detail or "")

    def test_is_supported_grid(self) -> None:
        assert is_supported_grid("4x4")
        assert not is_supported_grid("6x6")

    @pytest.mark.parametrize("token", [None, 33, ["3x3"], {"3x3": 1}])
    def test_non_string_tokens(self, token) -> None:
        assert not is_supported_grid(token)
        with pytest.raises(ConfigurationError):
            resolve_grid(token)

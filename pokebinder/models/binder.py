"""
Binder data model.

A binder is a sparse map of global slot positions to card entries plus the
settings that control its layout. The same shape is used for stored binders
and for exported static binder JSON, where card positions are encoded as
decimal strings and fields are camelCase.
"""

from datetime import datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from pokebinder.layout.grid import DEFAULT_GRID_SIZE, resolve_grid
from pokebinder.models.failure import ConfigurationError, MalformedSnapshotError

DEFAULT_PAGE_COUNT = 1
DEFAULT_MIN_PAGES = 1
DEFAULT_MAX_PAGES = 100


class CamelModel(BaseModel):
    """Base model serialising to camelCase while accepting either spelling."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CardSet(CamelModel):
    """The expansion a card belongs to."""

    id: str | None = None
    name: str | None = None
    series: str | None = None


class CardData(CamelModel):
    """
    Catalog snapshot of a card, stored alongside each binder entry.

    Unknown catalog fields (supertype, subtypes, ...) are kept as-is.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str
    name: str | None = None
    image: str | None = None
    image_small: str | None = None
    set: CardSet = Field(default_factory=CardSet)
    number: str | None = None
    artist: str | None = None
    rarity: str | None = None
    types: list[str] | None = None
    reverse_holo: bool = False


class CardEntry(CamelModel):
    """A card placed in one binder slot."""

    card_data: CardData
    instance_id: str
    added_at: datetime | None = None
    condition: str = "mint"
    notes: str = ""
    quantity: int = Field(default=1, ge=1)
    is_protected: bool = False

    @property
    def card_id(self) -> str:
        return self.card_data.id

    def binder_metadata(self) -> dict[str, Any]:
        """Per-slot metadata sidecar attached to rendered cards."""
        return {
            "instanceId": self.instance_id,
            "addedAt": self.added_at.isoformat() if self.added_at else None,
            "condition": self.condition,
            "notes": self.notes,
            "quantity": self.quantity,
            "isProtected": self.is_protected,
        }


class BinderSettings(CamelModel):
    """
    Layout settings of a binder.

    Missing or zero page fields fall back to their defaults
    (pageCount=1, minPages=1, maxPages=100).
    """

    grid_size: str = DEFAULT_GRID_SIZE
    page_count: int = Field(default=DEFAULT_PAGE_COUNT, ge=1)
    min_pages: int = Field(default=DEFAULT_MIN_PAGES, ge=1)
    max_pages: int = Field(default=DEFAULT_MAX_PAGES, ge=1)
    page_order: list[int] | None = None
    auto_expand: bool = True

    @field_validator("grid_size", mode="before")
    @classmethod
    def _default_grid_size(cls, value: Any) -> Any:
        return value or DEFAULT_GRID_SIZE

    @field_validator("grid_size")
    @classmethod
    def _supported_grid_size(cls, value: str) -> str:
        # Surface as a field error so request validation reports it
        try:
            resolve_grid(value)
        except ConfigurationError as e:
            raise ValueError(str(e)) from e
        return value

    @field_validator("page_count", "min_pages", "max_pages", mode="before")
    @classmethod
    def _default_page_fields(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or value == 0:
            return {
                "page_count": DEFAULT_PAGE_COUNT,
                "min_pages": DEFAULT_MIN_PAGES,
                "max_pages": DEFAULT_MAX_PAGES,
            }[info.field_name]
        return value

    @model_validator(mode="after")
    def _bounds_ordered(self) -> "BinderSettings":
        if self.min_pages > self.max_pages:
            raise ValueError(
                f"minPages ({self.min_pages}) cannot exceed maxPages ({self.max_pages})"
            )
        return self


class BinderSnapshot(CamelModel):
    """
    A fully loaded binder: settings plus the sparse card map.

    Card map keys are non-negative global slot positions.
    """

    settings: BinderSettings
    cards: dict[int, CardEntry] = Field(default_factory=dict)

    @field_validator("cards")
    @classmethod
    def _non_negative_positions(cls, value: dict[int, CardEntry]) -> dict[int, CardEntry]:
        negative = [pos for pos in value if pos < 0]
        if negative:
            raise ValueError(f"Card positions must be non-negative, got {negative}")
        return value

    @property
    def positions(self) -> list[int]:
        """Occupied positions in ascending order."""
        return sorted(self.cards)

    def cards_payload(self) -> dict[str, Any]:
        """Card map as JSON: decimal-string keys, camelCase entries."""
        return {
            str(pos): entry.model_dump(mode="json", by_alias=True)
            for pos, entry in sorted(self.cards.items())
        }

    def to_payload(self) -> dict[str, Any]:
        return {
            "settings": self.settings.model_dump(mode="json", by_alias=True),
            "cards": self.cards_payload(),
        }


def parse_snapshot(payload: Any) -> BinderSnapshot:
    """
    Validate a raw binder snapshot.

    `settings` and `cards` must both be present as objects; defaults apply only
    to individual missing settings fields, never to a missing settings object.

    Raises:
        MalformedSnapshotError: If the snapshot shape is invalid
        ConfigurationError: If the grid size token is not supported
    """
    if not isinstance(payload, dict):
        raise MalformedSnapshotError("Binder snapshot must be a JSON object")

    for key in ("settings", "cards"):
        if key not in payload or payload[key] is None:
            raise MalformedSnapshotError(
                f"Binder snapshot is missing '{key}'",
                detail=f"Present keys: {sorted(payload)}",
            )
        if not isinstance(payload[key], dict):
            raise MalformedSnapshotError(f"Binder snapshot '{key}' must be an object")

    # Reject unsupported grids with the dedicated error instead of a generic
    # validation failure
    settings = payload["settings"]
    grid_size = settings.get("gridSize") or settings.get("grid_size") or DEFAULT_GRID_SIZE
    resolve_grid(grid_size)

    # "01" and "1" would collapse onto one slot, so only canonical keys pass
    for key in payload["cards"]:
        text = str(key)
        if not text.isdecimal() or str(int(text)) != text:
            raise MalformedSnapshotError(
                "Card positions must be non-negative decimal integers",
                detail=f"Invalid position key: {key!r}",
            )

    try:
        return BinderSnapshot.model_validate(
            {"settings": payload["settings"], "cards": payload["cards"]}
        )
    except ValidationError as e:
        raise MalformedSnapshotError("Binder snapshot failed validation", detail=str(e)) from e

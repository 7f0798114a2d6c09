"""
Binder editing operations.

Pure functions that take a binder snapshot and return an updated copy:
placing, removing, updating and moving cards. Snapshots are never mutated in
place, so callers can keep the previous version for change tracking.
"""

import logging
import uuid
from datetime import UTC, datetime
from typing import Literal

from pydantic import ValidationError

from pokebinder.config import MAX_CARD_POSITION
from pokebinder.layout.grid import resolve_grid
from pokebinder.layout.pages import card_pages_to_spreads, required_card_pages
from pokebinder.models.binder import BinderSnapshot, CardData, CardEntry
from pokebinder.models.failure import FailureKind, KnownError

logger = logging.getLogger(__name__)

MoveMode = Literal["swap", "shift"]

EDITABLE_FIELDS = frozenset({"condition", "notes", "quantity", "is_protected"})


# =============================================================================
# CUSTOM EXCEPTIONS
# =============================================================================


class InvalidPositionError(KnownError):
    """Raised when a slot position is negative or beyond the supported range."""

    def __init__(self, position: object):
        self.position = position
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message=f"Invalid card position: {position!r}",
            detail=f"Positions must be integers between 0 and {MAX_CARD_POSITION}",
            status_code=400,
        )


class SlotOccupiedError(KnownError):
    """Raised when placing a card into a slot that already holds one."""

    def __init__(self, position: int):
        self.position = position
        super().__init__(
            kind=FailureKind.CONFLICT,
            message=f"Slot {position} already holds a card.",
            suggestion="Move or remove the existing card first, or omit the position.",
            status_code=409,
        )


class CardNotFoundError(KnownError):
    """Raised when no card sits at the requested position."""

    def __init__(self, position: int):
        self.position = position
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"No card at position {position}.",
            status_code=404,
        )


class InvalidMoveError(KnownError):
    """Raised when a move request cannot be applied."""

    def __init__(self, message: str):
        super().__init__(
            kind=FailureKind.INVALID_INPUT,
            message=message,
            status_code=400,
        )


class CardLimitError(KnownError):
    """Raised when a binder already holds the maximum number of cards."""

    def __init__(self, current: int, limit: int):
        self.current = current
        self.limit = limit
        super().__init__(
            kind=FailureKind.LIMIT_EXCEEDED,
            message=f"Card limit reached! This binder holds {current}/{limit} cards.",
            detail=f"max_cards_per_binder={limit}",
            status_code=409,
        )


# =============================================================================
# POSITION HELPERS
# =============================================================================


def validate_position(position: object) -> int:
    """
    Check that a slot position is usable.

    Raises:
        InvalidPositionError: If the position is not an int in [0, MAX_CARD_POSITION]
    """
    if isinstance(position, bool) or not isinstance(position, int):
        raise InvalidPositionError(position)
    if not 0 <= position <= MAX_CARD_POSITION:
        raise InvalidPositionError(position)
    return position


def find_next_empty_position(cards: dict[int, CardEntry], start: int = 0) -> int:
    """Lowest free slot at or after `start`."""
    position = start
    while position in cards:
        position += 1
    return position


def _expanded_settings(snapshot: BinderSnapshot, cards: dict[int, CardEntry]) -> BinderSnapshot:
    """Raise the declared page count to cover the highest occupied slot."""
    settings = snapshot.settings
    if not settings.auto_expand or not cards:
        return snapshot.model_copy(update={"cards": cards})

    grid_total = resolve_grid(settings.grid_size).total
    required = card_pages_to_spreads(required_card_pages(max(cards), grid_total))
    page_count = max(required, settings.page_count, settings.min_pages)

    if page_count != settings.page_count:
        logger.debug("Auto-expanding binder from %d to %d pages", settings.page_count, page_count)

    return snapshot.model_copy(
        update={
            "cards": cards,
            "settings": settings.model_copy(update={"page_count": page_count}),
        }
    )


# =============================================================================
# EDIT OPERATIONS
# =============================================================================


def add_card(
    snapshot: BinderSnapshot,
    card_data: CardData,
    position: int | None = None,
    *,
    condition: str = "mint",
    notes: str = "",
    quantity: int = 1,
    is_protected: bool = False,
    max_cards: int | None = None,
) -> tuple[BinderSnapshot, int]:
    """
    Place a card into the binder.

    Args:
        snapshot: Binder to add to
        card_data: Catalog snapshot of the card
        position: Target slot; defaults to the first empty slot
        max_cards: Optional cap on the number of occupied slots

    Returns:
        Tuple of (updated snapshot, position the card was placed at)

    Raises:
        CardLimitError: If the binder is already full
        InvalidPositionError: If the position is out of range
        SlotOccupiedError: If the explicit slot already holds a card
    """
    if max_cards is not None and len(snapshot.cards) >= max_cards:
        raise CardLimitError(len(snapshot.cards), max_cards)

    if position is None:
        target = find_next_empty_position(snapshot.cards)
    else:
        target = validate_position(position)
        if target in snapshot.cards:
            raise SlotOccupiedError(target)

    if quantity < 1:
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message="Quantity must be positive",
        )

    entry = CardEntry(
        card_data=card_data,
        instance_id=uuid.uuid4().hex,
        added_at=datetime.now(UTC),
        condition=condition,
        notes=notes,
        quantity=quantity,
        is_protected=is_protected,
    )
    cards = {**snapshot.cards, target: entry}
    logger.debug("Placed card %s at slot %d", entry.card_id, target)
    return _expanded_settings(snapshot, cards), target


def remove_card(snapshot: BinderSnapshot, position: int) -> tuple[BinderSnapshot, CardEntry]:
    """
    Remove the card at `position`.

    Returns:
        Tuple of (updated snapshot, removed entry)

    Raises:
        CardNotFoundError: If the slot is empty
    """
    if position not in snapshot.cards:
        raise CardNotFoundError(position)

    cards = dict(snapshot.cards)
    removed = cards.pop(position)
    logger.debug("Removed card %s from slot %d", removed.card_id, position)
    return snapshot.model_copy(update={"cards": cards}), removed


def update_card(snapshot: BinderSnapshot, position: int, **changes: object) -> BinderSnapshot:
    """
    Update slot metadata (condition, notes, quantity, is_protected).

    Raises:
        CardNotFoundError: If the slot is empty
        KnownError: If a field is not editable or a value is invalid
    """
    entry = snapshot.cards.get(position)
    if entry is None:
        raise CardNotFoundError(position)

    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message=f"Fields cannot be edited: {', '.join(sorted(unknown))}",
        )

    try:
        updated = CardEntry.model_validate({**entry.model_dump(), **changes})
    except ValidationError as e:
        raise KnownError(
            kind=FailureKind.INVALID_INPUT,
            message="Invalid card update",
            detail=str(e),
        ) from e

    return snapshot.model_copy(update={"cards": {**snapshot.cards, position: updated}})


def move_card(
    snapshot: BinderSnapshot,
    from_position: int,
    to_position: int,
    mode: MoveMode = "swap",
) -> BinderSnapshot:
    """
    Move a card to another slot.

    An empty destination receives the card directly. An occupied destination
    is either swapped with the source ("swap") or the cards in between slide
    one slot toward the vacated source ("shift").

    Raises:
        InvalidPositionError: If either position is out of range
        InvalidMoveError: If the source is empty or equals the destination
    """
    validate_position(from_position)
    validate_position(to_position)

    moving = snapshot.cards.get(from_position)
    if moving is None:
        raise InvalidMoveError("No card at source position")
    if from_position == to_position:
        raise InvalidMoveError("Source and destination positions are the same")

    cards = dict(snapshot.cards)
    occupant = cards.get(to_position)

    if occupant is None:
        del cards[from_position]
        cards[to_position] = moving
    elif mode == "swap":
        cards[from_position] = occupant
        cards[to_position] = moving
    else:
        del cards[from_position]
        step = 1 if from_position < to_position else -1
        # Walk from the source toward the destination, pulling each card back
        # into the slot behind it
        for pos in range(from_position + step, to_position + step, step):
            behind = pos - step
            if pos in cards:
                cards[behind] = cards[pos]
            else:
                cards.pop(behind, None)
        cards[to_position] = moving

    return _expanded_settings(snapshot, cards)

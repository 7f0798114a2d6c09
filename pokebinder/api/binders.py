"""
Binder API endpoints.

Provides CRUD operations for binders, card placement within a binder, and
read access to the binder's page layout (spreads and single pages).
"""

from typing import Annotated, Any, Literal

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from pokebinder.config import settings as app_settings
from pokebinder.db import (
    binder_to_snapshot,
    create_binder,
    delete_binder,
    get_binder_or_fail,
    list_binders,
    save_snapshot,
)
from pokebinder.db.database import get_session
from pokebinder.layout.engine import BinderLayout, SpreadView
from pokebinder.layout.navigator import PageNavigator
from pokebinder.layout.slices import RenderedCard
from pokebinder.layout.spread import PageSide, page_label
from pokebinder.models.binder import BinderSettings, CardData
from pokebinder.models.db import BinderDB
from pokebinder.models.failure import FailureKind, KnownError
from pokebinder.services.binder_editor import add_card, move_card, remove_card, update_card
from pokebinder.services.rate_limits import (
    BINDER_CREATION,
    BINDER_EXPORT,
    CARD_ADDITION,
    RateLimiter,
    get_rate_limiter,
)
from pokebinder.services.static_binders import build_static_binder

router = APIRouter(prefix="/binders", tags=["binders"])


# =============================================================================
# REQUEST / RESPONSE MODELS
# =============================================================================


class CreateBinderRequest(BaseModel):
    """Request model for creating a binder."""

    owner_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    is_public: bool = False
    settings: BinderSettings | None = Field(
        default=None,
        description="Layout settings; defaults to a 3x3 grid with 1-100 pages",
    )


class BinderResponse(BaseModel):
    """Response model for a full binder."""

    binder_id: str
    owner_id: str
    name: str
    description: str = ""
    is_public: bool = False
    settings: BinderSettings
    cards: dict[str, Any] = Field(
        default_factory=dict,
        description="Sparse card map keyed by decimal-string slot position",
    )
    card_count: int = 0
    total_pages: int = 1


class BinderSummary(BaseModel):
    """Short listing entry for a binder."""

    binder_id: str
    name: str
    grid_size: str
    card_count: int
    is_public: bool


class BinderListResponse(BaseModel):
    owner_id: str
    binders: list[BinderSummary] = Field(default_factory=list)


class DeleteResponse(BaseModel):
    """Response model for delete operations."""

    binder_id: str
    deleted: bool
    message: str = ""


class AddCardRequest(BaseModel):
    """Request model for placing a card into a binder."""

    card: CardData
    position: int | None = Field(
        default=None,
        description="Target slot; omitted means the first empty slot",
    )
    condition: str = "mint"
    notes: str = ""
    quantity: int = Field(default=1, ge=1)
    is_protected: bool = False


class AddCardResponse(BaseModel):
    position: int
    binder: BinderResponse


class UpdateCardRequest(BaseModel):
    """Request model for editing slot metadata. Omitted fields are unchanged."""

    condition: str | None = None
    notes: str | None = None
    quantity: int | None = Field(default=None, ge=1)
    is_protected: bool | None = None


class MoveCardRequest(BaseModel):
    """Request model for moving a card between slots."""

    from_position: int
    to_position: int
    mode: Literal["swap", "shift"] = Field(
        default="swap",
        description="swap exchanges with an occupied destination, "
        "shift slides the cards in between",
    )


class ExportRequest(BaseModel):
    """Options for exporting a binder as a static snapshot."""

    slug: str | None = None
    featured: bool = False
    seo_title: str | None = None
    seo_description: str | None = None
    tags: list[str] = Field(default_factory=list)
    category: str | None = None


class LayoutResponse(BaseModel):
    """Page layout summary of a binder."""

    grid_size: str
    rows: int
    columns: int
    cards_per_page: int
    total_pages: int
    total_single_pages: int
    unreachable_positions: list[int] = Field(
        default_factory=list,
        description="Occupied slots hidden because maxPages caps the page count",
    )


class PageSideResponse(BaseModel):
    type: str
    page_number: int | None = None
    card_page_index: int | None = None
    cards: list[RenderedCard | None] | None = None


class SpreadResponse(BaseModel):
    """One rendered view: a spread in book mode or a single page."""

    index: int
    total_pages: int
    type: str
    label: str
    left_page: PageSideResponse
    right_page: PageSideResponse | None = None
    can_go_prev: bool
    can_go_next: bool


class PageOutOfRangeError(KnownError):
    """Raised when a requested page index lies outside the binder."""

    def __init__(self, index: int, total_pages: int):
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"Page {index} does not exist.",
            detail=f"Valid page indices: 0-{total_pages - 1}",
            status_code=404,
        )


# =============================================================================
# HELPERS
# =============================================================================


def binder_response(binder: BinderDB) -> BinderResponse:
    layout = BinderLayout(binder_to_snapshot(binder))
    return BinderResponse(
        binder_id=binder.binder_id,
        owner_id=binder.owner_id,
        name=binder.name,
        description=binder.description,
        is_public=binder.is_public,
        settings=layout.snapshot.settings,
        cards=layout.snapshot.cards_payload(),
        card_count=len(layout.snapshot.cards),
        total_pages=layout.total_pages,
    )


def layout_response(layout: BinderLayout) -> LayoutResponse:
    return LayoutResponse(
        grid_size=layout.grid.token,
        rows=layout.grid.rows,
        columns=layout.grid.columns,
        cards_per_page=layout.grid.total,
        total_pages=layout.total_pages,
        total_single_pages=layout.total_single_pages,
        unreachable_positions=layout.unreachable_positions(),
    )


def _side_response(side: PageSide, view: SpreadView) -> PageSideResponse:
    cards = view.pages.get(side.card_page_index) if side.card_page_index is not None else None
    return PageSideResponse(
        type=side.type.value,
        page_number=side.page_number,
        card_page_index=side.card_page_index,
        cards=cards,
    )


def spread_response(
    layout: BinderLayout,
    index: int,
    *,
    single_page: bool = False,
) -> SpreadResponse:
    """
    Render the view at `index`.

    Raises:
        PageOutOfRangeError: If the index is outside the navigable range
    """
    total = layout.total_single_pages if single_page else layout.total_pages
    navigator = PageNavigator(total_pages=total)
    if not navigator.go_to(index):
        raise PageOutOfRangeError(index, total)

    view = layout.single_page_view(index) if single_page else layout.spread_view(index)
    spread = view.spread
    return SpreadResponse(
        index=index,
        total_pages=total,
        type=spread.type.value,
        label=page_label(spread),
        left_page=_side_response(spread.left_page, view),
        right_page=_side_response(spread.right_page, view) if spread.right_page else None,
        can_go_prev=navigator.can_go_prev,
        can_go_next=navigator.can_go_next,
    )


# =============================================================================
# BINDER CRUD
# =============================================================================


@router.post("", response_model=BinderResponse, status_code=status.HTTP_201_CREATED)
async def create_user_binder(
    request: CreateBinderRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> BinderResponse:
    """Create an empty binder for a user."""
    limiter.check(request.owner_id, BINDER_CREATION)

    binder = await create_binder(
        session,
        request.owner_id,
        request.name,
        description=request.description,
        settings=request.settings,
        is_public=request.is_public,
    )
    limiter.hit(request.owner_id, BINDER_CREATION)
    return binder_response(binder)


@router.get("", response_model=BinderListResponse)
async def list_user_binders(
    owner_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> BinderListResponse:
    """List a user's binders."""
    binders = await list_binders(session, owner_id)
    return BinderListResponse(
        owner_id=owner_id,
        binders=[
            BinderSummary(
                binder_id=b.binder_id,
                name=b.name,
                grid_size=binder_to_snapshot(b).settings.grid_size,
                card_count=len(b.cards),
                is_public=b.is_public,
            )
            for b in binders
        ],
    )


@router.get("/{binder_id}", response_model=BinderResponse)
async def get_user_binder(
    binder_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> BinderResponse:
    """Get a binder with its settings and cards."""
    binder = await get_binder_or_fail(session, binder_id)
    return binder_response(binder)


@router.put("/{binder_id}/settings", response_model=BinderResponse)
async def update_binder_settings(
    binder_id: str,
    request: BinderSettings,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> BinderResponse:
    """
    Replace a binder's layout settings.

    Changing the grid size re-flows pages but never moves cards: positions
    are global, so each card lands on whichever page now covers its slot.
    """
    binder = await get_binder_or_fail(session, binder_id)
    snapshot = binder_to_snapshot(binder).model_copy(update={"settings": request})
    await save_snapshot(session, binder, snapshot)
    return binder_response(binder)


@router.delete("/{binder_id}", response_model=DeleteResponse)
async def delete_user_binder(
    binder_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeleteResponse:
    """Delete a binder and all of its cards."""
    deleted = await delete_binder(session, binder_id)

    if deleted:
        message = "Your binder has been deleted."
    else:
        message = "No binder found to delete."

    return DeleteResponse(binder_id=binder_id, deleted=deleted, message=message)


# =============================================================================
# CARDS
# =============================================================================


@router.post(
    "/{binder_id}/cards",
    response_model=AddCardResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_binder_card(
    binder_id: str,
    request: AddCardRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> AddCardResponse:
    """Place a card into a binder slot (first empty slot by default)."""
    binder = await get_binder_or_fail(session, binder_id)
    limiter.check(binder.owner_id, CARD_ADDITION)

    snapshot, position = add_card(
        binder_to_snapshot(binder),
        request.card,
        request.position,
        condition=request.condition,
        notes=request.notes,
        quantity=request.quantity,
        is_protected=request.is_protected,
        max_cards=app_settings.max_cards_per_binder,
    )
    await save_snapshot(session, binder, snapshot)
    # Only stored cards count; a refused hit discards the uncommitted change
    limiter.hit(binder.owner_id, CARD_ADDITION)
    return AddCardResponse(position=position, binder=binder_response(binder))


@router.patch("/{binder_id}/cards/{position}", response_model=BinderResponse)
async def update_binder_card(
    binder_id: str,
    position: int,
    request: UpdateCardRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> BinderResponse:
    """Edit condition, notes, quantity or protection of the card in a slot."""
    binder = await get_binder_or_fail(session, binder_id)
    changes = request.model_dump(exclude_unset=True, exclude_none=True)
    snapshot = update_card(binder_to_snapshot(binder), position, **changes)
    await save_snapshot(session, binder, snapshot)
    return binder_response(binder)


@router.delete("/{binder_id}/cards/{position}", response_model=BinderResponse)
async def remove_binder_card(
    binder_id: str,
    position: int,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> BinderResponse:
    """Empty a binder slot."""
    binder = await get_binder_or_fail(session, binder_id)
    snapshot, _ = remove_card(binder_to_snapshot(binder), position)
    await save_snapshot(session, binder, snapshot)
    return binder_response(binder)


@router.post("/{binder_id}/cards/move", response_model=BinderResponse)
async def move_binder_card(
    binder_id: str,
    request: MoveCardRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> BinderResponse:
    """Move a card to another slot, swapping or shifting occupied slots."""
    binder = await get_binder_or_fail(session, binder_id)
    snapshot = move_card(
        binder_to_snapshot(binder),
        request.from_position,
        request.to_position,
        request.mode,
    )
    await save_snapshot(session, binder, snapshot)
    return binder_response(binder)


# =============================================================================
# LAYOUT
# =============================================================================


@router.get("/{binder_id}/layout", response_model=LayoutResponse)
async def get_binder_layout(
    binder_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> LayoutResponse:
    """Get grid dimensions and page counts of a binder."""
    binder = await get_binder_or_fail(session, binder_id)
    return layout_response(BinderLayout(binder_to_snapshot(binder)))


@router.get("/{binder_id}/spreads/{index}", response_model=SpreadResponse)
async def get_binder_spread(
    binder_id: str,
    index: int,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> SpreadResponse:
    """Get the two-page spread at `index` with the cards of each page."""
    binder = await get_binder_or_fail(session, binder_id)
    return spread_response(BinderLayout(binder_to_snapshot(binder)), index)


@router.get("/{binder_id}/single-pages/{index}", response_model=SpreadResponse)
async def get_binder_single_page(
    binder_id: str,
    index: int,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> SpreadResponse:
    """Get the single-page view at `index` (0 is the cover)."""
    binder = await get_binder_or_fail(session, binder_id)
    return spread_response(BinderLayout(binder_to_snapshot(binder)), index, single_page=True)


@router.post("/{binder_id}/export")
async def export_binder(
    binder_id: str,
    request: ExportRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> dict[str, Any]:
    """Build the static snapshot document for a binder."""
    binder = await get_binder_or_fail(session, binder_id)
    limiter.check(binder.owner_id, BINDER_EXPORT)

    document = build_static_binder(
        binder.binder_id,
        binder.name,
        binder_to_snapshot(binder),
        description=binder.description,
        featured=request.featured,
        slug=request.slug,
        seo_title=request.seo_title,
        seo_description=request.seo_description,
        tags=request.tags,
        category=request.category,
    )
    limiter.hit(binder.owner_id, BINDER_EXPORT)
    return document

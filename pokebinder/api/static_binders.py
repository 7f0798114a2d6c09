"""
Static binder API endpoints.

Serves exported public binders by slug, with the same layout views as
stored binders.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from pokebinder.api.binders import LayoutResponse, SpreadResponse, layout_response, spread_response
from pokebinder.config import settings
from pokebinder.layout.engine import BinderLayout
from pokebinder.services.static_binders import StaticBinderClient

router = APIRouter(prefix="/static-binders", tags=["static-binders"])


class StaticBinderResponse(BaseModel):
    """Response model for a static binder."""

    id: str
    slug: str
    name: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    seo: dict[str, Any] = Field(default_factory=dict)
    layout: LayoutResponse
    generated_at: str | None = None


def get_static_binder_client() -> StaticBinderClient:
    """Dependency providing a client for the configured static binder host."""
    return StaticBinderClient(settings.static_binders_base_url)


@router.get("/{slug}", response_model=StaticBinderResponse)
async def get_static_binder(
    slug: str,
    client: Annotated[StaticBinderClient, Depends(get_static_binder_client)],
) -> StaticBinderResponse:
    """Load a static binder and summarise its layout."""
    binder = await client.fetch(slug)
    return StaticBinderResponse(
        id=binder.id,
        slug=binder.slug,
        name=binder.name,
        metadata=binder.metadata,
        seo=binder.seo,
        layout=layout_response(BinderLayout(binder.snapshot)),
        generated_at=binder.generated_at,
    )


@router.get("/{slug}/spreads/{index}", response_model=SpreadResponse)
async def get_static_binder_spread(
    slug: str,
    index: int,
    client: Annotated[StaticBinderClient, Depends(get_static_binder_client)],
) -> SpreadResponse:
    """Get one spread of a static binder."""
    binder = await client.fetch(slug)
    return spread_response(BinderLayout(binder.snapshot), index)

"""
Static binder snapshots.

Public binders are exported as standalone JSON files so they can be served
without a database round trip. Each file holds `metadata`, `settings`,
`cards` and `seo` plus generation info, and lives at
`/static-binders/{slug}.json`. An `index.json` next to them lists every
exported binder for discovery.
"""

import json
import logging
import re
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import httpx
from pydantic import BaseModel, Field

from pokebinder.models.binder import BinderSnapshot, parse_snapshot
from pokebinder.models.failure import FailureKind, KnownError, MalformedSnapshotError

logger = logging.getLogger(__name__)

STATIC_BINDER_VERSION = "1.0"
INDEX_FILENAME = "index.json"
# Slugs that would collide with files written next to the binders
RESERVED_SLUGS = frozenset({"index"})
BASE_KEYWORDS = ("pokemon cards", "card collection", "trading cards")


class StaticBinderNotFoundError(KnownError):
    """Raised when no static binder exists for a slug."""

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"Static binder '{slug}' not found.",
            status_code=404,
        )


class StaticBinder(BaseModel):
    """A parsed static binder file."""

    id: str
    slug: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    seo: dict[str, Any] = Field(default_factory=dict)
    snapshot: BinderSnapshot
    generated_at: str | None = None
    version: str = STATIC_BINDER_VERSION

    @property
    def name(self) -> str:
        return str(self.metadata.get("name", self.slug))


def slugify(name: str) -> str:
    """SEO-friendly slug: "Base Set Holos!" -> "base-set-holos"."""
    slug = name.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")


def binder_statistics(snapshot: BinderSnapshot) -> dict[str, Any]:
    """Card count, distinct sets and card types of a binder."""
    sets: set[str] = set()
    card_types: list[str] = []
    for entry in snapshot.cards.values():
        if entry.card_data.set.name:
            sets.add(entry.card_data.set.name)
        for card_type in entry.card_data.types or []:
            if card_type not in card_types:
                card_types.append(card_type)

    return {
        "cardCount": len(snapshot.cards),
        "uniqueSets": len(sets),
        "setNames": sorted(sets),
        "cardTypes": card_types,
        "lastUpdated": datetime.now(UTC).isoformat(),
    }


def build_static_binder(
    binder_id: str,
    name: str,
    snapshot: BinderSnapshot,
    *,
    description: str = "",
    featured: bool = False,
    slug: str | None = None,
    seo_title: str | None = None,
    seo_description: str | None = None,
    tags: Iterable[str] = (),
    category: str | None = None,
) -> dict[str, Any]:
    """
    Build the exported JSON document for one binder.

    SEO fields fall back to values derived from the binder name, description
    and statistics when no override is given. A slug that would clash with
    `index.json` gets the binder id appended.
    """
    slug = slug or slugify(name) or binder_id
    if slug in RESERVED_SLUGS:
        slug = f"{slug}-{binder_id[:8]}"
    tags = list(tags)
    statistics = binder_statistics(snapshot)
    set_names = statistics.pop("setNames")

    description_text = (
        seo_description
        or description
        or f"Explore this Pokemon card collection featuring {statistics['cardCount']} cards "
        f"from {statistics['uniqueSets']} different sets."
    )

    return {
        "id": binder_id,
        "slug": slug,
        "metadata": {
            "name": name,
            "description": description,
            "featured": featured,
            "category": category,
            "tags": tags,
            "statistics": statistics,
        },
        "seo": {
            "title": seo_title or f"{name} | Pokemon Card Collection",
            "description": description_text,
            "keywords": ", ".join([*BASE_KEYWORDS, *set_names, *tags]),
            "ogImage": f"/static-binders/{slug}/preview.jpg",
            "canonicalUrl": f"/binders/{slug}",
        },
        **snapshot.to_payload(),
        "generatedAt": datetime.now(UTC).isoformat(),
        "version": STATIC_BINDER_VERSION,
    }


def parse_static_binder(payload: Any) -> StaticBinder:
    """
    Parse an exported static binder document.

    Raises:
        MalformedSnapshotError: If the document or its snapshot is invalid
        ConfigurationError: If the grid size is not supported
    """
    snapshot = parse_snapshot(payload)
    slug = payload.get("slug")
    if not slug:
        raise MalformedSnapshotError("Static binder is missing 'slug'")

    return StaticBinder(
        id=str(payload.get("id") or slug),
        slug=slug,
        metadata=payload.get("metadata") or {},
        seo=payload.get("seo") or {},
        snapshot=snapshot,
        generated_at=payload.get("generatedAt"),
        version=payload.get("version") or STATIC_BINDER_VERSION,
    )


def _index_entry(document: dict[str, Any]) -> dict[str, Any]:
    metadata = document["metadata"]
    return {
        "id": document["id"],
        "slug": document["slug"],
        "name": metadata.get("name"),
        "description": metadata.get("description"),
        "featured": metadata.get("featured", False),
        "category": metadata.get("category"),
        "tags": metadata.get("tags", []),
        "statistics": metadata.get("statistics", {}),
        "seo": document["seo"],
        "lastUpdated": document["generatedAt"],
    }


def save_static_binders(directory: Path, documents: Iterable[dict[str, Any]]) -> list[str]:
    """
    Write static binder documents and refresh the index.

    Existing index entries are kept unless a document with the same id is
    written again.

    Returns:
        Slugs of the written binders
    """
    directory.mkdir(parents=True, exist_ok=True)
    index_path = directory / INDEX_FILENAME

    existing: list[dict[str, Any]] = []
    if index_path.exists():
        try:
            existing = json.loads(index_path.read_text(encoding="utf-8")).get("binders", [])
        except (json.JSONDecodeError, AttributeError):
            logger.warning("Could not read existing index %s, creating new one", index_path)

    entries = {entry["id"]: entry for entry in existing if "id" in entry}
    written: list[str] = []

    for document in documents:
        if document["slug"] in RESERVED_SLUGS:
            raise ValueError(f"Slug '{document['slug']}' is reserved")
        path = directory / f"{document['slug']}.json"
        path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        entries[document["id"]] = _index_entry(document)
        written.append(document["slug"])
        logger.info("Generated static binder: %s", document["slug"])

    index = {
        "binders": sorted(entries.values(), key=lambda e: (not e.get("featured"), e["slug"])),
        "lastUpdated": datetime.now(UTC).isoformat(),
    }
    index_path.write_text(json.dumps(index, indent=2), encoding="utf-8")
    return written


class StaticBinderClient:
    """
    Loads static binder files over HTTP.

    Files are fetched from `{base_url}/static-binders/{slug}.json`.
    """

    def __init__(self, base_url: str, client: httpx.AsyncClient | None = None):
        self.base_url = base_url.rstrip("/")
        self._client = client

    def url_for(self, slug: str) -> str:
        return f"{self.base_url}/static-binders/{slug}.json"

    async def _get(self, url: str) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url)
        async with httpx.AsyncClient(
            headers={"User-Agent": "PokeBinder/1.0"},
            follow_redirects=True,
            timeout=30.0,
        ) as client:
            return await client.get(url)

    async def fetch(self, slug: str) -> StaticBinder:
        """
        Fetch and parse a static binder.

        Raises:
            StaticBinderNotFoundError: If the file does not exist
            KnownError: If the file cannot be fetched or is not JSON
            MalformedSnapshotError: If the document is invalid
        """
        if slug in RESERVED_SLUGS or slugify(slug) != slug:
            raise StaticBinderNotFoundError(slug)

        url = self.url_for(slug)
        try:
            response = await self._get(url)
        except httpx.HTTPError as e:
            logger.error("Failed to fetch static binder %s: %s", slug, e)
            raise KnownError(
                kind=FailureKind.SERVICE_UNAVAILABLE,
                message="Static binders are temporarily unavailable.",
                detail=str(e),
                status_code=503,
            ) from e

        if response.status_code == 404:
            raise StaticBinderNotFoundError(slug)
        if response.is_error:
            logger.error("Static binder %s returned HTTP %d", slug, response.status_code)
            raise KnownError(
                kind=FailureKind.SERVICE_UNAVAILABLE,
                message="Static binders are temporarily unavailable.",
                detail=f"HTTP {response.status_code} from {url}",
                status_code=503,
            )

        try:
            payload = response.json()
        except json.JSONDecodeError as e:
            raise MalformedSnapshotError(
                f"Static binder '{slug}' is not valid JSON", detail=str(e)
            ) from e

        return parse_static_binder(payload)

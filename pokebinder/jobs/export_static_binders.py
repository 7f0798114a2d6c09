"""
Export public binders as static JSON snapshots.

Writes one `{slug}.json` per public binder plus an `index.json` so the
frontend can serve featured binders without a database call.
Can be run as a standalone script or called from a scheduler.
"""

import argparse
import asyncio
import logging
from pathlib import Path

from pokebinder.config import settings
from pokebinder.db.database import async_session_factory
from pokebinder.db.operations import binder_to_snapshot, list_public_binders
from pokebinder.models.failure import KnownError
from pokebinder.services.static_binders import (
    RESERVED_SLUGS,
    build_static_binder,
    save_static_binders,
    slugify,
)

logger = logging.getLogger(__name__)


async def run_export(output_dir: Path) -> list[str]:
    """
    Export every public binder.

    Binders whose stored data no longer validates are skipped and logged.

    Returns:
        Slugs of the exported binders
    """
    documents = []
    used_slugs: set[str] = set()

    async with async_session_factory() as session:
        binders = await list_public_binders(session)
        logger.info("Exporting %d public binders to %s", len(binders), output_dir)

        for binder in binders:
            try:
                snapshot = binder_to_snapshot(binder)
            except KnownError as e:
                logger.error("Skipping binder %s: %s", binder.binder_id, e.message)
                continue

            # Binders sharing a name or a reserved slug get the id appended to stay distinct
            slug = slugify(binder.name) or binder.binder_id
            if slug in used_slugs or slug in RESERVED_SLUGS:
                slug = f"{slug}-{binder.binder_id[:8]}"
            used_slugs.add(slug)

            documents.append(
                build_static_binder(
                    binder.binder_id,
                    binder.name,
                    snapshot,
                    description=binder.description,
                    slug=slug,
                )
            )

    slugs = save_static_binders(output_dir, documents)
    logger.info("Static export complete. Binders written: %d", len(slugs))
    return slugs


def main() -> None:
    """CLI entry point for exporting static binders."""
    parser = argparse.ArgumentParser(description="Export public binders as static JSON")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path(settings.static_binders_dir),
        help="Directory to write {slug}.json files and index.json into",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_export(args.output))


if __name__ == "__main__":
    main()

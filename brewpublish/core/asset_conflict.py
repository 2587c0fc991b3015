"""Same-name asset conflict resolution.

GitHub refuses an upload whose name collides with an asset already attached
to the release, so a re-publish deletes the old asset first.
"""

from __future__ import annotations

import logging

from brewpublish.core.client import RemoteRepositoryClient
from brewpublish.models.github import AssetRecord, ReleaseRecord

logger = logging.getLogger(__name__)


async def clear_conflicting_asset(
    client: RemoteRepositoryClient,
    repo: str,
    release: ReleaseRecord,
    file_name: str,
) -> AssetRecord | None:
    """Delete the asset named ``file_name`` from ``release`` if present.

    Returns the deleted asset, or None when nothing collided.
    """
    existing = release.find_asset(file_name)
    if existing is None:
        return None

    logger.info(
        "Deleting asset %s (id %s) from release %s", existing.name, existing.id, release.id
    )
    await client.delete_asset(repo, existing.id)
    return existing

"""Get-or-create for the release identified by a tag.

Re-running a publish for a tag that already has a release reuses it instead
of failing on "tag already exists".
"""

from __future__ import annotations

import logging

from brewpublish.core.client import DEFAULT_RELEASE_BODY, RemoteRepositoryClient
from brewpublish.core.errors import NotFound
from brewpublish.models.github import ReleaseRecord

logger = logging.getLogger(__name__)


async def resolve_release(
    client: RemoteRepositoryClient,
    repo: str,
    tag: str,
    *,
    body: str = DEFAULT_RELEASE_BODY,
) -> tuple[ReleaseRecord, bool]:
    """Return ``(release, created)`` for ``tag`` in ``repo``.

    Only ``NotFound`` triggers creation; any other failure of the lookup
    propagates unchanged.
    """
    try:
        release = await client.get_release_by_tag(repo, tag)
    except NotFound:
        logger.info("No release for %s@%s, creating one", repo, tag)
        release = await client.create_release(repo, tag, body=body)
        return release, True

    logger.info("Reusing release %s for %s@%s", release.id, repo, tag)
    return release, False

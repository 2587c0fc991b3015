"""Create-or-update of a text file under optimistic concurrency.

The read and the write are two separate requests, so another writer can
slip in between them. The remote's ``sha`` check on the write is what keeps
the update correct; this module only supplies the hash seen by the read.
"""

from __future__ import annotations

import base64
import logging

from pydantic import BaseModel, ConfigDict

from brewpublish.core.client import RemoteRepositoryClient
from brewpublish.core.errors import PublishError

logger = logging.getLogger(__name__)


class UpsertOutcome(BaseModel):
    """What an upsert did."""

    model_config = ConfigDict(frozen=True)

    path: str
    previous_sha: str | None = None
    created: bool
    lookup_failed: bool = False  # only ever True in lenient mode


def encode_content(content: str) -> str:
    """Base64 of the UTF-8 bytes, as the contents API expects."""
    return base64.b64encode(content.encode("utf-8")).decode("ascii")


class FileUpserter:
    """Writes a file, passing the current hash when the file already exists.

    Parameters
    ----------
    client:
        The GitHub client.
    strict:
        When True (the default) a lookup failure other than "absent" aborts
        the upsert. When False it is logged and the file is written as new,
        which the remote rejects if the file does in fact exist.
    """

    def __init__(self, client: RemoteRepositoryClient, *, strict: bool = True) -> None:
        self._client = client
        self._strict = strict

    async def upsert(
        self,
        repo: str,
        path: str,
        content: str,
        message: str,
    ) -> UpsertOutcome:
        """Create ``path`` in ``repo`` or overwrite it with ``content``."""
        lookup_failed = False
        try:
            existing = await self._client.get_file(repo, path)
        except PublishError as exc:
            if self._strict:
                raise
            logger.warning(
                "Lookup of %s in %s failed (%s); writing it as a new file", path, repo, exc
            )
            existing = None
            lookup_failed = True

        previous_sha = existing.sha if existing is not None else None
        logger.debug("Upserting %s in %s (sha=%s)", path, repo, previous_sha)
        await self._client.put_file(
            repo, path, encode_content(content), message, sha=previous_sha
        )
        return UpsertOutcome(
            path=path,
            previous_sha=previous_sha,
            created=previous_sha is None,
            lookup_failed=lookup_failed,
        )

"""Per-target run lock: at most one in-flight publish per (repository, tag).

A second run for a key that is already held is rejected, not queued.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from brewpublish.core.errors import PublishInProgress

logger = logging.getLogger(__name__)


class RunLockRegistry:
    """Registry of targets with a publish in flight."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._held: set[tuple[str, str]] = set()

    def acquire(self, repo: str, tag: str) -> None:
        """Mark ``(repo, tag)`` as in flight; raises ``PublishInProgress`` if it already is."""
        key = (repo, tag)
        with self._guard:
            if key in self._held:
                raise PublishInProgress(repo, tag)
            self._held.add(key)
        logger.debug("Acquired publish lock for %s@%s", repo, tag)

    def release(self, repo: str, tag: str) -> None:
        with self._guard:
            self._held.discard((repo, tag))
        logger.debug("Released publish lock for %s@%s", repo, tag)

    def is_held(self, repo: str, tag: str) -> bool:
        with self._guard:
            return (repo, tag) in self._held

    @contextmanager
    def hold(self, repo: str, tag: str) -> Iterator[None]:
        self.acquire(repo, tag)
        try:
            yield
        finally:
            self.release(repo, tag)


# Process-wide registry used when an orchestrator is not given its own.
default_registry = RunLockRegistry()

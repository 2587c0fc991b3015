"""SHA-256 fingerprinting of release artifacts.

The digest goes into the manifest's ``sha256`` field, so it must be
bit-reproducible: identical bytes always give the identical lowercase hex
string.
"""

from __future__ import annotations

import asyncio
import hashlib
from pathlib import Path

from brewpublish.core.errors import ArtifactUnreadable

# 1 MiB reads keep memory flat for large archives.
CHUNK_SIZE = 1 << 20


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def sha256_file(path: Path, chunk_size: int = CHUNK_SIZE) -> str:
    """Stream a file through SHA-256 and return the hex digest.

    Raises ``ArtifactUnreadable`` if the file cannot be opened or read.
    """
    digest = hashlib.sha256()
    try:
        with open(path, "rb") as fh:
            for chunk in iter(lambda: fh.read(chunk_size), b""):
                digest.update(chunk)
    except OSError as exc:
        raise ArtifactUnreadable(path, exc.strerror or str(exc)) from exc
    return digest.hexdigest()


def read_artifact(path: Path) -> bytes:
    """Read the whole artifact; raises ``ArtifactUnreadable`` on failure."""
    try:
        with open(path, "rb") as fh:
            return fh.read()
    except OSError as exc:
        raise ArtifactUnreadable(path, exc.strerror or str(exc)) from exc


async def fingerprint_artifact(path: Path) -> tuple[str, bytes]:
    """Read an artifact once in a worker thread and hash those bytes.

    Returns the digest together with the exact bytes it covers, so the
    caller can upload what was hashed even if the file changes afterwards.
    """
    data = await asyncio.to_thread(read_artifact, path)
    return sha256_hex(data), data

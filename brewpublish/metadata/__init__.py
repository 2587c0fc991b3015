"""Best-effort metadata extraction from a release archive.

Used only to pre-fill a ``PublishRequest``; the publish workflow never
depends on it. Nothing here raises on a bad archive: missing or unreadable
data comes back as ``None`` fields.
"""

from __future__ import annotations

import fnmatch
import logging
import plistlib
import zipfile
import zlib
from pathlib import Path
from xml.parsers.expat import ExpatError

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

INFO_PLIST_PATTERN = "*.app/Contents/Info.plist"


class ArchiveMetadata(BaseModel):
    """What could be read from an archive; every field is optional."""

    model_config = ConfigDict(frozen=True)

    version: str | None = None
    name: str | None = None
    bundle_identifier: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.version is None and self.name is None and self.bundle_identifier is None


def is_zip_archive(path: Path) -> bool:
    """Whether ``path`` has a ``.zip`` extension (case-insensitive)."""
    return path.suffix.lower() == ".zip"


def infer_from_filename(path: Path) -> str:
    """Guess a package name from ``MyApp-1.0.zip`` style names: ``myapp``."""
    return path.stem.split("-", 1)[0].lower()


def _find_info_plist(names: list[str]) -> str | None:
    # Shallowest match wins so a nested helper app does not shadow the main one.
    matches = [n for n in names if fnmatch.fnmatch(n, INFO_PLIST_PATTERN)]
    if not matches:
        return None
    return min(matches, key=lambda n: n.count("/"))


def _string_value(plist: dict, key: str) -> str | None:
    value = plist.get(key)
    return value if isinstance(value, str) and value else None


def extract_metadata(archive_path: Path) -> ArchiveMetadata:
    """Read version, name and bundle identifier from the app's Info.plist."""
    member: str | None = None
    try:
        with zipfile.ZipFile(archive_path) as archive:
            member = _find_info_plist(archive.namelist())
            if member is None:
                logger.info("No Info.plist found in %s", archive_path)
                return ArchiveMetadata()
            raw = archive.read(member)
    except (OSError, zipfile.BadZipFile) as exc:
        logger.warning("Cannot open %s as a zip archive: %s", archive_path, exc)
        return ArchiveMetadata()
    except (RuntimeError, NotImplementedError, EOFError, zlib.error) as exc:
        # Encrypted member, unsupported compression or a corrupt stream.
        logger.warning("Cannot read %s in %s: %s", member, archive_path, exc)
        return ArchiveMetadata()

    try:
        plist = plistlib.loads(raw)
    except (plistlib.InvalidFileException, ExpatError, ValueError) as exc:
        logger.warning("Cannot parse %s in %s: %s", member, archive_path, exc)
        return ArchiveMetadata()
    if not isinstance(plist, dict):
        return ArchiveMetadata()

    return ArchiveMetadata(
        version=_string_value(plist, "CFBundleShortVersionString"),
        name=_string_value(plist, "CFBundleName"),
        bundle_identifier=_string_value(plist, "CFBundleIdentifier"),
    )

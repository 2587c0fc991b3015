"""Publish request model: the immutable input of one publish run."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from brewpublish.core.errors import ArtifactUnreadable


class PackageKind(str, Enum):
    """Which kind of Homebrew manifest a publish produces."""

    FORMULA = "formula"  # command-line tool
    CASK = "cask"  # macOS application bundle


class PublishRequest(BaseModel):
    """Everything a publish run needs, constructed once before the run.

    The request is frozen: the orchestrator reads it but never mutates it,
    and presentation code builds a new one per run instead of binding form
    fields to the workflow.
    """

    model_config = ConfigDict(frozen=True)

    artifact_path: Path
    package_name: str
    version: str  # release tag
    description: str = ""
    homepage: str = ""
    owner: str  # account owning both repositories
    source_repo: str  # repository receiving the release
    tap_repo: str = "homebrew-tap"
    kind: PackageKind = PackageKind.CASK

    @field_validator("package_name", "version", "owner", "source_repo", "tap_repo")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @property
    def source_slug(self) -> str:
        """``owner/source_repo``, where the release is created."""
        return f"{self.owner}/{self.source_repo}"

    @property
    def tap_slug(self) -> str:
        """``owner/tap_repo``, where the manifest is committed."""
        return f"{self.owner}/{self.tap_repo}"

    @property
    def artifact_name(self) -> str:
        return self.artifact_path.name

    @property
    def target_key(self) -> tuple[str, str]:
        """Key used to serialize concurrent runs against the same release.

        GitHub owner and repository names are case-insensitive, so the slug
        is lowercased.
        """
        return (self.source_slug.lower(), self.version)

    def validate_artifact(self) -> None:
        """Raise ``ArtifactUnreadable`` unless the artifact is a readable regular file."""
        if not self.artifact_path.is_file():
            raise ArtifactUnreadable(self.artifact_path, "not a regular file")

"""Brewpublish data models: all Pydantic v2, all frozen (immutable)."""

from brewpublish.models.events import EventSeverity, PublishEvent, PublishResult
from brewpublish.models.github import (
    AssetRecord,
    GitHubUser,
    ReleaseRecord,
    RepositoryFileRecord,
)
from brewpublish.models.manifest import ManifestSpec, RenderedManifest
from brewpublish.models.request import PackageKind, PublishRequest
from brewpublish.models.states import (
    STEP_SEQUENCE,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    PublishState,
)

__all__ = [
    # request
    "PackageKind",
    "PublishRequest",
    # github
    "AssetRecord",
    "GitHubUser",
    "ReleaseRecord",
    "RepositoryFileRecord",
    # manifest
    "ManifestSpec",
    "RenderedManifest",
    # states
    "PublishState",
    "STEP_SEQUENCE",
    "TERMINAL_STATES",
    "VALID_TRANSITIONS",
    # events
    "EventSeverity",
    "PublishEvent",
    "PublishResult",
]

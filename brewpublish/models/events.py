"""Publish transcript models: progress events and the terminal result."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from brewpublish.models.github import AssetRecord, ReleaseRecord
from brewpublish.models.manifest import RenderedManifest
from brewpublish.models.states import PublishState


class EventSeverity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class PublishEvent(BaseModel):
    """One human-readable line of a publish transcript."""

    model_config = ConfigDict(frozen=True)

    sequence: int  # position in the run's transcript, starting at 0
    severity: EventSeverity
    message: str
    state: PublishState
    timestamp_utc: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )


class PublishResult(BaseModel):
    """Terminal outcome of a publish run."""

    model_config = ConfigDict(frozen=True)

    succeeded: bool
    state: PublishState
    events: tuple[PublishEvent, ...] = ()
    digest: str | None = None
    release: ReleaseRecord | None = None
    release_created: bool = False
    asset: AssetRecord | None = None
    replaced_asset: AssetRecord | None = None
    manifest: RenderedManifest | None = None
    install_command: str | None = None
    error: str | None = None
    error_status: int | None = None
    cancelled: bool = False

    @property
    def last_event(self) -> PublishEvent | None:
        return self.events[-1] if self.events else None

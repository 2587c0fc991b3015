"""Manifest input and output models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from brewpublish.models.request import PackageKind


class ManifestSpec(BaseModel):
    """Inputs for rendering a Formula or Cask. Pure value, no identity."""

    model_config = ConfigDict(frozen=True)

    kind: PackageKind
    name: str
    description: str = ""
    homepage: str = ""
    version: str
    sha256: str
    url: str


class RenderedManifest(BaseModel):
    """A rendered manifest and its path inside the tap repository."""

    model_config = ConfigDict(frozen=True)

    path: str  # e.g. "Formula/mytool.rb" or "Casks/my-tool.rb"
    content: str

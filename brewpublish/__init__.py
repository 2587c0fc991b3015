"""Brewpublish: publish a zip archive as a GitHub release and update a Homebrew tap.

One publish run:
  - fingerprints the archive (SHA-256)
  - gets or creates the release for the version tag
  - deletes a same-named asset left by an earlier run, then uploads
  - renders a Formula (CLI tool) or Cask (macOS app)
  - creates or updates the manifest in the tap under the file's current sha
"""

__version__ = "0.1.0"
__description__ = "Publish a zip as a GitHub release and update a Homebrew tap"

from brewpublish.core.client import RemoteRepositoryClient
from brewpublish.core.orchestrator import PublishOrchestrator
from brewpublish.models.request import PackageKind, PublishRequest

__all__ = [
    "PackageKind",
    "PublishOrchestrator",
    "PublishRequest",
    "RemoteRepositoryClient",
    "__version__",
]

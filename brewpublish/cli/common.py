"""Helpers shared by CLI commands: console, logging setup, client factory."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from brewpublish.config import PublisherConfig, config
from brewpublish.core.client import RemoteRepositoryClient

console = Console()


def configure_logging(level: str) -> None:
    """Route library logging through Rich at ``level``."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def build_client(
    token: str | None = None, settings: PublisherConfig | None = None
) -> RemoteRepositoryClient:
    """Create the GitHub client; raises ``MissingToken`` when no token is available."""
    return RemoteRepositoryClient.from_config(settings or config, token=token or None)

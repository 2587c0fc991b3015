"""``brewpublish inspect ARTIFACT``: show what a publish would pre-fill."""

from __future__ import annotations

from pathlib import Path

import typer

from brewpublish.cli import common
from brewpublish.cli.renderer import PublishRenderer
from brewpublish.core.errors import ArtifactUnreadable
from brewpublish.core.hasher import sha256_file
from brewpublish.metadata import extract_metadata, infer_from_filename


def inspect_cmd(
    artifact: Path = typer.Argument(..., help="Path to the zip archive."),
) -> None:
    """Show the archive's app metadata and SHA-256."""
    console = common.console
    try:
        digest = sha256_file(artifact)
    except ArtifactUnreadable as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=1)

    metadata = extract_metadata(artifact)
    renderer = PublishRenderer(console=console)
    console.print(renderer.render_metadata(artifact.name, metadata, digest))
    if metadata.name is None:
        console.print(
            f"[dim]No app name in the archive; the file name suggests "
            f"'{infer_from_filename(artifact)}'.[/dim]"
        )

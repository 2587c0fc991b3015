"""``brewpublish render``: preview a manifest without touching GitHub."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.syntax import Syntax

from brewpublish.cli import common
from brewpublish.core.errors import ArtifactUnreadable
from brewpublish.core.hasher import sha256_file
from brewpublish.core.manifest import render_manifest
from brewpublish.models.manifest import ManifestSpec
from brewpublish.models.request import PackageKind


def render_cmd(
    name: str = typer.Option(..., "--name", "-n", help="Package name."),
    version: str = typer.Option(..., "--version", "-v", help="Package version."),
    url: str = typer.Option(..., "--url", "-u", help="Download URL of the archive."),
    kind: PackageKind = typer.Option(
        PackageKind.CASK, "--kind", "-k", case_sensitive=False, help="cask or formula."
    ),
    sha256: str = typer.Option(
        None, "--sha256", help="Archive SHA-256. Computed from --artifact when omitted."
    ),
    artifact: Path = typer.Option(
        None, "--artifact", "-a", help="Local archive to fingerprint."
    ),
    description: str = typer.Option("", "--description", "-d", help="Package description."),
    homepage: str = typer.Option("", "--homepage", help="Package homepage URL."),
) -> None:
    """Render a Formula or Cask and print it with its tap path."""
    console = common.console

    if not sha256:
        if artifact is None:
            console.print("[bold red]Pass --sha256 or --artifact.[/bold red]")
            raise typer.Exit(code=1)
        try:
            sha256 = sha256_file(artifact)
        except ArtifactUnreadable as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            raise typer.Exit(code=1)

    manifest = render_manifest(
        ManifestSpec(
            kind=kind,
            name=name,
            description=description,
            homepage=homepage,
            version=version,
            sha256=sha256,
            url=url,
        )
    )
    console.print(f"[bold cyan]{manifest.path}[/bold cyan]")
    console.print(Syntax(manifest.content, "ruby", theme="ansi_dark"))

"""``brewpublish publish ARTIFACT``: release a zip and update the tap.

Builds one immutable ``PublishRequest`` from the options (pre-filled from
the archive's Info.plist and file name where options are omitted), runs the
orchestrator, and streams the transcript as it is produced.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.markup import escape

from brewpublish.cli import common
from brewpublish.cli.renderer import PublishRenderer
from brewpublish.config import config
from brewpublish.core.errors import PublishError
from brewpublish.core.orchestrator import PublishOrchestrator
from brewpublish.metadata import extract_metadata, infer_from_filename, is_zip_archive
from brewpublish.models.request import PackageKind, PublishRequest


def publish_cmd(
    artifact: Path = typer.Argument(
        ...,
        help="Path to the zip archive to publish.",
    ),
    name: str = typer.Option(
        None,
        "--name",
        "-n",
        help="Package name. Defaults to the app name in the archive or the file name.",
    ),
    version: str = typer.Option(
        None,
        "--version",
        "-v",
        help="Release tag and package version. Defaults to the archive's version.",
    ),
    kind: PackageKind = typer.Option(
        PackageKind.CASK,
        "--kind",
        "-k",
        case_sensitive=False,
        help="Manifest kind: cask (macOS app) or formula (CLI tool).",
    ),
    description: str = typer.Option("", "--description", "-d", help="Package description."),
    homepage: str = typer.Option("", "--homepage", help="Package homepage URL."),
    owner: str = typer.Option(
        None,
        "--owner",
        "-o",
        help="Account owning both repositories. Defaults to the token's account.",
    ),
    source_repo: str = typer.Option(
        None,
        "--source-repo",
        "-s",
        help="Repository receiving the release. Defaults to the archive file name stem.",
    ),
    tap_repo: str = typer.Option(
        None,
        "--tap-repo",
        "-t",
        help="Tap repository receiving the manifest.",
    ),
    token: str = typer.Option(
        None,
        "--token",
        envvar="BREWPUBLISH_GITHUB_TOKEN",
        help="GitHub token. Read from BREWPUBLISH_GITHUB_TOKEN when omitted.",
    ),
    lenient_file_lookup: bool = typer.Option(
        False,
        "--lenient-file-lookup",
        help="Write the manifest as new if reading the current one fails.",
    ),
    transcript: bool = typer.Option(
        False,
        "--transcript",
        help="Print the full event transcript as a table when the run ends.",
    ),
) -> None:
    """Publish ARTIFACT as a GitHub release and update the Homebrew tap."""
    console = common.console

    if not artifact.is_file():
        console.print(f"[bold red]Artifact not found:[/bold red] {artifact}")
        raise typer.Exit(code=1)
    if not is_zip_archive(artifact):
        console.print(
            f"[bold red]Only .zip archives can be published, got:[/bold red] {artifact.name}"
        )
        raise typer.Exit(code=1)

    metadata = extract_metadata(artifact)
    package_name = name or metadata.name or infer_from_filename(artifact)
    package_version = version or metadata.version
    if not package_version:
        console.print(
            "[bold red]No version given and none found in the archive.[/bold red] "
            "Pass --version."
        )
        raise typer.Exit(code=1)

    try:
        client = common.build_client(token)
        if not owner:
            owner = asyncio.run(client.get_authenticated_user()).login
            console.print(f"[dim]Publishing as {owner}[/dim]")
    except PublishError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    try:
        request = PublishRequest(
            artifact_path=artifact,
            package_name=package_name,
            version=package_version,
            description=description,
            homepage=homepage,
            owner=owner,
            source_repo=source_repo or infer_from_filename(artifact),
            tap_repo=tap_repo or config.default_tap_repo,
            kind=kind,
        )
    except ValidationError as exc:
        console.print(f"[bold red]Invalid publish request:[/bold red]\n{exc}")
        raise typer.Exit(code=1)

    renderer = PublishRenderer(console=console)
    orchestrator = PublishOrchestrator(
        client,
        config=config,
        strict_file_lookup=False if lenient_file_lookup else None,
    )
    result = asyncio.run(orchestrator.run(request, listener=renderer.print_event))
    if transcript:
        console.print(renderer.render_transcript(result.events))
    renderer.print_result(result)

    if not result.succeeded:
        raise typer.Exit(code=1)

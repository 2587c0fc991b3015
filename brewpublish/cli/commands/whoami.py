"""``brewpublish whoami``: verify the GitHub token."""

from __future__ import annotations

import asyncio

import typer
from rich.markup import escape

from brewpublish.cli import common
from brewpublish.core.errors import PublishError


def whoami_cmd(
    token: str = typer.Option(
        None,
        "--token",
        envvar="BREWPUBLISH_GITHUB_TOKEN",
        help="GitHub token. Read from BREWPUBLISH_GITHUB_TOKEN when omitted.",
    ),
) -> None:
    """Show the account the token authenticates as."""
    console = common.console
    try:
        client = common.build_client(token)
        user = asyncio.run(client.get_authenticated_user())
    except PublishError as exc:
        console.print(f"[bold red]Token check failed:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)

    display = f"{user.login} ({user.name})" if user.name else user.login
    console.print(f"[bold green]Authenticated as[/bold green] {escape(display)}")

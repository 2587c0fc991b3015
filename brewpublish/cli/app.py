"""Main Typer application: imports and registers all CLI commands.

Entry point: ``brewpublish`` (configured via pyproject.toml console_scripts).
"""

from __future__ import annotations

import typer

from brewpublish.cli.common import configure_logging
from brewpublish.cli.commands.inspect_cmd import inspect_cmd
from brewpublish.cli.commands.publish import publish_cmd
from brewpublish.cli.commands.render import render_cmd
from brewpublish.cli.commands.whoami import whoami_cmd
from brewpublish.config import config

app = typer.Typer(
    name="brewpublish",
    help="Brewpublish: publish a zip as a GitHub release and update a Homebrew tap.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
) -> None:
    configure_logging("DEBUG" if verbose else config.log_level)


# Register subcommands
app.command(name="publish", help="Publish a zip archive and update the tap.")(publish_cmd)
app.command(name="render", help="Render a Formula or Cask locally.")(render_cmd)
app.command(name="inspect", help="Show archive metadata and SHA-256.")(inspect_cmd)
app.command(name="whoami", help="Verify the GitHub token.")(whoami_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()

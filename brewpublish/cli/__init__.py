"""Brewpublish CLI: Typer-based command-line interface.

Provides the ``brewpublish`` command with subcommands for publishing an
archive, previewing a manifest, inspecting an archive, and checking the
GitHub token.

All output uses Rich for formatted terminal display.
"""

"""Brewpublish CLI subcommands."""

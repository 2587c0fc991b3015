"""Brewpublish core: the publish workflow and the GitHub client it drives.

Modules
-------
client
    ``RemoteRepositoryClient``: async GitHub REST client with status
    translation into the error taxonomy.
release_resolver, asset_conflict, file_upserter
    The idempotent steps: release get-or-create, same-name asset removal,
    and the tap file create-or-update.
manifest
    Pure Formula/Cask rendering.
orchestrator
    ``PublishOrchestrator``: sequences the steps and produces the transcript.
"""

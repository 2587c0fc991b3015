"""Publish run state model: strictly sequential transitions."""

from __future__ import annotations

from enum import Enum


class PublishState(str, Enum):
    """Where a publish run currently is."""

    IDLE = "idle"
    HASHING = "hashing"
    RESOLVING_RELEASE = "resolving_release"
    RESOLVING_ASSET_CONFLICT = "resolving_asset_conflict"
    UPLOADING = "uploading"
    GENERATING_MANIFEST = "generating_manifest"
    UPSERTING_FILE = "upserting_file"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


# The happy path, in execution order.
STEP_SEQUENCE: list[PublishState] = [
    PublishState.IDLE,
    PublishState.HASHING,
    PublishState.RESOLVING_RELEASE,
    PublishState.RESOLVING_ASSET_CONFLICT,
    PublishState.UPLOADING,
    PublishState.GENERATING_MANIFEST,
    PublishState.UPSERTING_FILE,
    PublishState.SUCCEEDED,
]

TERMINAL_STATES: frozenset[PublishState] = frozenset(
    {PublishState.SUCCEEDED, PublishState.FAILED}
)


def _build_transitions() -> dict[PublishState, set[PublishState]]:
    table: dict[PublishState, set[PublishState]] = {}
    for current, following in zip(STEP_SEQUENCE, STEP_SEQUENCE[1:]):
        table[current] = {following, PublishState.FAILED}
    table[PublishState.SUCCEEDED] = set()  # terminal
    table[PublishState.FAILED] = set()  # terminal, absorbing
    return table


# Each non-terminal state may advance one step or fail.
VALID_TRANSITIONS: dict[PublishState, set[PublishState]] = _build_transitions()

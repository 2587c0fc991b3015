"""Publish state machine.

Enforces:
- Valid state transitions only (VALID_TRANSITIONS table)
- Strictly sequential steps; FAILED is reachable from any non-terminal state
- No transitions out of SUCCEEDED or FAILED
"""

from __future__ import annotations

import logging

from brewpublish.models.states import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    PublishState,
)

logger = logging.getLogger(__name__)


class InvalidTransitionError(RuntimeError):
    """Raised when a requested state transition is not valid."""


class PublishStateMachine:
    """Tracks the state of a single publish run."""

    def __init__(self) -> None:
        self._state = PublishState.IDLE
        self._history: list[PublishState] = [PublishState.IDLE]

    @property
    def state(self) -> PublishState:
        return self._state

    @property
    def history(self) -> list[PublishState]:
        """Every state entered so far, in order."""
        return list(self._history)

    @property
    def is_terminal(self) -> bool:
        return self._state in TERMINAL_STATES

    def transition(self, target: PublishState) -> PublishState:
        """Move to ``target``; returns the state that was left."""
        allowed = VALID_TRANSITIONS.get(self._state, set())
        if target not in allowed:
            raise InvalidTransitionError(
                f"Cannot transition from {self._state.value} to {target.value}. "
                f"Allowed: {sorted(s.value for s in allowed)}"
            )
        previous = self._state
        self._state = target
        self._history.append(target)
        logger.debug("Publish state %s -> %s", previous.value, target.value)
        return previous

    def fail(self) -> PublishState:
        """Enter FAILED from any non-terminal state."""
        return self.transition(PublishState.FAILED)

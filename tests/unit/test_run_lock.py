"""Tests for the per-target run lock."""

from __future__ import annotations

import pytest

from brewpublish.core.errors import PublishInProgress
from brewpublish.core.run_lock import RunLockRegistry


class TestRunLockRegistry:
    def test_acquire_and_release(self):
        locks = RunLockRegistry()
        locks.acquire("octo/app", "1.0.0")
        assert locks.is_held("octo/app", "1.0.0")
        locks.release("octo/app", "1.0.0")
        assert not locks.is_held("octo/app", "1.0.0")

    def test_second_acquire_rejected(self):
        locks = RunLockRegistry()
        locks.acquire("octo/app", "1.0.0")
        with pytest.raises(PublishInProgress) as exc_info:
            locks.acquire("octo/app", "1.0.0")
        assert "octo/app@1.0.0" in str(exc_info.value)

    def test_different_targets_independent(self):
        locks = RunLockRegistry()
        locks.acquire("octo/app", "1.0.0")
        locks.acquire("octo/app", "1.0.1")
        locks.acquire("octo/other", "1.0.0")
        assert locks.is_held("octo/app", "1.0.1")

    def test_hold_releases_on_error(self):
        locks = RunLockRegistry()
        with pytest.raises(ValueError):
            with locks.hold("octo/app", "1.0.0"):
                raise ValueError("boom")
        assert not locks.is_held("octo/app", "1.0.0")

    def test_release_unheld_is_noop(self):
        RunLockRegistry().release("octo/app", "1.0.0")

"""Unit tests for the mode tracker."""

import pytest

from src.core.errors import RemoteUnreachableError
from src.services.connectivity import ModeTracker


@pytest.mark.unit
class TestModeTracker:
    """Tests for ModeTracker."""

    def test_starts_online(self):
        assert ModeTracker().is_offline is False

    def test_failure_then_success(self):
        tracker = ModeTracker()

        tracker.record_failure(RemoteUnreachableError("down"))
        assert tracker.is_offline is True
        assert tracker.is_online is False

        tracker.record_success()
        assert tracker.is_offline is False

    def test_stays_offline_until_next_success(self):
        tracker = ModeTracker()
        tracker.record_failure(RemoteUnreachableError("down"))
        tracker.record_failure(RemoteUnreachableError("still down"))

        assert tracker.is_offline is True

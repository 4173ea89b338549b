"""
Unit tests for ConsoleEventTracker adapter.

Tests verify the console tracker implements the EventTracker protocol
and logs events in the expected format.
"""

import logging

import pytest

from profile_email.adapters.telemetry.console import ConsoleEventTracker
from profile_email.domain.ports import EventTracker


class TestConsoleEventTrackerProtocol:
    """Tests for EventTracker protocol compliance."""

    def test_implements_event_tracker_protocol(self) -> None:
        tracker = ConsoleEventTracker()
        assert callable(tracker.track)

        def accepts_event_tracker(t: EventTracker) -> None:
            pass

        accepts_event_tracker(tracker)

    def test_no_explicit_inheritance(self) -> None:
        """ConsoleEventTracker uses structural subtyping, not inheritance."""
        assert ConsoleEventTracker.__bases__ == (object,)


class TestTrack:
    """Tests for track method."""

    def test_track_logs_at_info(self, caplog: pytest.LogCaptureFixture) -> None:
        tracker = ConsoleEventTracker()

        with caplog.at_level(logging.INFO):
            tracker.track("io.citizen-auth.validate_email", {"samplingEnabled": "false"})

        assert len(caplog.records) == 1
        assert caplog.records[0].levelno == logging.INFO

    def test_track_format_sorts_tags(self, caplog: pytest.LogCaptureFixture) -> None:
        """Log format: [EVENT] Name: ... Tags: k=v k=v (sorted by key)."""
        tracker = ConsoleEventTracker()

        with caplog.at_level(logging.INFO):
            tracker.track("an.event", {"samplingEnabled": "false", "ai.user.id": "abc"})

        assert caplog.records[0].getMessage() == (
            "[EVENT] Name: an.event Tags: ai.user.id=abc samplingEnabled=false"
        )

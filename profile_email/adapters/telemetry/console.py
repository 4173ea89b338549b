"""
Console event tracker adapter - Implements EventTracker protocol.

This module provides a logging-based implementation of the domain's
event tracker port. Events are written as single log lines so any log
shipper can forward them to the telemetry backend.
"""

import logging
from collections.abc import Mapping

logger = logging.getLogger(__name__)


class ConsoleEventTracker:
    """
    Implements EventTracker protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def track(self, name: str, tags: Mapping[str, str]) -> None:
        """
        Log a telemetry event at INFO level.

        Tags are rendered sorted by key so identical events produce
        identical lines.

        Args:
            name: Event name
            tags: Event tags (already pseudonymized by the domain layer)
        """
        rendered = " ".join(f"{key}={value}" for key, value in sorted(tags.items()))
        logger.info("[EVENT] Name: %s Tags: %s", name, rendered)

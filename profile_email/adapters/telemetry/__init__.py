"""Telemetry adapters - Event tracking implementations."""

from .console import ConsoleEventTracker

__all__ = ["ConsoleEventTracker"]

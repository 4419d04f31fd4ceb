"""Helpers for a usage time tracker: durations and time ranges, validation, timeouts and retries, permission checks and functional utilities."""

__version__ = "0.2.2"
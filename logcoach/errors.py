"""
Exception types raised by the combat log engine.
"""


class LogCoachError(Exception):
    """Base class for engine errors."""


class InvalidFormat(LogCoachError):
    """The input does not look like a combat log."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ConfigError(LogCoachError):
    """A configuration value is missing or out of range."""

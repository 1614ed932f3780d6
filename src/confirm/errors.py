"""Error taxonomy for the confirm CLI."""

from __future__ import annotations


class ConfirmError(RuntimeError):
    """Base class for errors reported to the user before exiting with status 1."""


class UsageError(ConfirmError):
    """Raised when command-line arguments are missing or malformed."""

    def __init__(self, message: str, *, show_usage: bool = False) -> None:
        super().__init__(message)
        self.show_usage = show_usage


class ConfigError(ConfirmError):
    """Raised when the configuration file cannot be read or parsed."""


class PlatformUnavailableError(ConfirmError):
    """Raised when a dialog or authentication binding cannot run here."""

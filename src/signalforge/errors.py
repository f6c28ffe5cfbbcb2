"""Exception hierarchy for SignalForge."""


class SignalForgeError(Exception):
    """Base exception for all SignalForge errors."""


class ConfigurationError(SignalForgeError):
    """Raised when a configuration or component type cannot be honoured."""


class CollectorError(SignalForgeError):
    """Raised when a collector cannot produce records for a source."""

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        super().__init__(f"{source}: {message}")


class StorageError(SignalForgeError):
    """Raised when the run store cannot read or write history."""

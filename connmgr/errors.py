"""Error taxonomy raised by the connection manager."""

from __future__ import annotations


class ConnectionManagerError(RuntimeError):
    """Base error for connection resolution failures."""


class UnknownConnectionError(ConnectionManagerError, LookupError):
    """Raised when a connection name has no configured definition."""

    def __init__(self, name: str | None) -> None:
        if name is None:
            message = "No connection name given and no default connection configured."
        else:
            message = f"Connection '{name}' is not configured."
        super().__init__(message)
        self.name = name


class InvalidConfigError(ConnectionManagerError):
    """Raised when a connection definition is missing a required field."""

    def __init__(self, name: str, field: str) -> None:
        super().__init__(f"Connection '{name}' is missing required field '{field}'.")
        self.name = name
        self.field = field


class UnknownDriverError(ConnectionManagerError, LookupError):
    """Raised when no registered or built-in creator exists for a driver."""

    def __init__(self, driver: str) -> None:
        super().__init__(f"No creator registered for driver '{driver}'.")
        self.driver = driver


class ReentrantConnectionError(ConnectionManagerError):
    """Raised when a creator requests the connection it is currently creating."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Connection '{name}' was requested while it is being created on the same thread.")
        self.name = name


class ConnectionCreationError(ConnectionManagerError):
    """Wraps an exception raised by a creator."""

    def __init__(self, name: str, driver: str, cause: BaseException) -> None:
        super().__init__(f"Failed to create connection '{name}' (driver '{driver}'): {cause}")
        self.name = name
        self.driver = driver
        self.cause = cause


__all__ = [
    "ConnectionCreationError",
    "ConnectionManagerError",
    "InvalidConfigError",
    "ReentrantConnectionError",
    "UnknownConnectionError",
    "UnknownDriverError",
]

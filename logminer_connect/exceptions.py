"""Exceptions raised by the connector bootstrap."""

from typing import List, Optional


class LogminerConnectError(Exception):
    """Base class for all connector bootstrap errors."""


class ConfigurationInvalid(LogminerConnectError, ValueError):
    """The connector configuration cannot be used; the task must not start."""

    def __init__(self, message: str, keys: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.keys = keys or []


class ConnectivityFailure(LogminerConnectError):
    """A transient failure to reach the database, eligible for retry."""


class ConnectionUnavailable(LogminerConnectError):
    """No connection could be acquired within the retry policy."""

"""
Application-level exceptions.

- ConfigurationError: sale configuration cannot drive a statistics run.
- DataQualityError: a log entry carries a malformed numeric field.
"""

from __future__ import annotations


class IcoMonitorError(Exception):
    """Base class for all ico_monitor errors."""


class ConfigurationError(IcoMonitorError):
    """Sale config or log mapping is unusable (e.g. no counting event)."""


class DataQualityError(IcoMonitorError):
    """A log entry has a non-numeric or missing token, ether, or value field."""

    def __init__(
        self,
        message: str,
        event_name: str | None = None,
        index: int | None = None,
        transaction_hash: str | None = None,
    ) -> None:
        super().__init__(message)
        self.event_name = event_name
        self.index = index
        self.transaction_hash = transaction_hash

    def __str__(self) -> str:
        msg = super().__str__()
        if self.event_name is None:
            return msg
        return f"{msg} (event={self.event_name}, index={self.index}, tx={self.transaction_hash})"

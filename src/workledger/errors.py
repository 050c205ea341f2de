"""
Error hierarchy for WorkLedger.
"""

from __future__ import annotations

from typing import Any


class WorkLedgerError(Exception):
    """Base class for every error raised by WorkLedger itself."""


class InvalidOperation(WorkLedgerError):
    """
    Raised when an entity cannot move to the requested scheduling state.
    """

    def __init__(self, message: str, entity: Any = None) -> None:
        super().__init__(message)
        self.entity = entity


class InvalidArgument(WorkLedgerError, TypeError):
    """Raised when a value that is not an entity is handed to the unit of work."""


class StoreError(WorkLedgerError):
    """Base error for gateway and backing store failures."""


class StoreConfigurationError(StoreError):
    """Raised when store settings are invalid or no gateway serves a type tag."""


class StoreExecutionError(StoreError):
    """Raised when a read or write against the backing store fails."""

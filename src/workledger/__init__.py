"""
WorkLedger public package initialization.

This module exposes the primary public APIs of the unit of work engine and
its bundled gateways.
"""

from .core import Entity  # noqa: F401
from .errors import (  # noqa: F401
    InvalidArgument,
    InvalidOperation,
    StoreConfigurationError,
    StoreError,
    StoreExecutionError,
    WorkLedgerError,
)
from .gateways import GatewayRegistry, InMemoryStore, SQLiteStore, StoreConfig  # noqa: F401
from .hooks import EventManager, Events, hooks  # noqa: F401
from .persistence import (  # noqa: F401
    EntityManager,
    EntityState,
    TransactionObserver,
    UnitOfWork,
)

__all__ = [
    "Entity",
    "EntityManager",
    "EntityState",
    "EventManager",
    "Events",
    "GatewayRegistry",
    "InMemoryStore",
    "InvalidArgument",
    "InvalidOperation",
    "SQLiteStore",
    "StoreConfig",
    "StoreConfigurationError",
    "StoreError",
    "StoreExecutionError",
    "TransactionObserver",
    "UnitOfWork",
    "WorkLedgerError",
    "hooks",
]

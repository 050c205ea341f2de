"""
Persistence layer components: unit of work, identity registry, entity manager.
"""

from .identity import IdentityRegistry
from .manager import EntityManager
from .observer import CallbackObserver, CompositeObserver, TransactionObserver
from .state import EntityState
from .unit_of_work import UnitOfWork

__all__ = [
    "CallbackObserver",
    "CompositeObserver",
    "EntityManager",
    "EntityState",
    "IdentityRegistry",
    "TransactionObserver",
    "UnitOfWork",
]

"""
Gateway interfaces and bundled store implementations.
"""

from .base import Gateway, GatewayBuilder, GatewayFactory, GatewayRegistry, StoreConfig
from .memory import InMemoryGateway, InMemoryStore
from .sqlite import SQLiteGateway, SQLiteStore

__all__ = [
    "Gateway",
    "GatewayBuilder",
    "GatewayFactory",
    "GatewayRegistry",
    "StoreConfig",
    "InMemoryGateway",
    "InMemoryStore",
    "SQLiteGateway",
    "SQLiteStore",
]

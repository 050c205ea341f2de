"""
Lifecycle notifications published by the unit of work.
"""

from .dispatcher import (
    EventHandler,
    EventManager,
    Events,
    OnClearEventArgs,
    OnFlushEventArgs,
    PostFlushEventArgs,
    PreFlushEventArgs,
    hooks,
)

__all__ = [
    "EventHandler",
    "EventManager",
    "Events",
    "OnClearEventArgs",
    "OnFlushEventArgs",
    "PostFlushEventArgs",
    "PreFlushEventArgs",
    "hooks",
]

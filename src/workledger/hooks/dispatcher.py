"""
Event manager coordinating unit of work lifecycle notifications.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

if TYPE_CHECKING:
    from ..persistence.manager import EntityManager


EventHandler = Callable[[Any], None]


class Events:
    """Names of the lifecycle points a unit of work publishes."""

    PRE_FLUSH = "pre_flush"
    ON_FLUSH = "on_flush"
    POST_FLUSH = "post_flush"
    ON_CLEAR = "on_clear"


@dataclass(frozen=True)
class PreFlushEventArgs:
    session: Optional["EntityManager"]


@dataclass(frozen=True)
class OnFlushEventArgs:
    session: Optional["EntityManager"]


@dataclass(frozen=True)
class PostFlushEventArgs:
    session: Optional["EntityManager"]


@dataclass(frozen=True)
class OnClearEventArgs:
    session: Optional["EntityManager"]
    entity_type: Optional[type] = None

    def clears_all(self) -> bool:
        return self.entity_type is None


class EventManager:
    """
    Maintains handlers per event name and dispatches to them in registration order.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)

    def register(self, event: str, handler: EventHandler) -> None:
        self._handlers[event].append(handler)

    def unregister(self, event: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event)
        if not handlers or handler not in handlers:
            return
        handlers.remove(handler)
        if not handlers:
            del self._handlers[event]

    def has_listeners(self, event: str) -> bool:
        return bool(self._handlers.get(event))

    def dispatch(self, event: str, args: Any = None) -> None:
        for handler in list(self._handlers.get(event, [])):
            handler(args)

    def clear(self) -> None:
        self._handlers.clear()


hooks = EventManager()

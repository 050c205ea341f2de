"""
Entity manager owning a unit of work and its collaborators.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional

from ..gateways.base import Gateway, GatewayFactory
from ..hooks import EventManager, hooks
from ..utils import get_logger
from .observer import TransactionObserver
from .state import EntityState
from .unit_of_work import UnitOfWork


class EntityManager:
    """
    Application-facing session: register entities, then flush them in one go.
    """

    def __init__(
        self,
        gateways: GatewayFactory,
        *,
        event_manager: Optional[EventManager] = None,
        observer: Optional[TransactionObserver] = None,
        slow_call_ms: Optional[int] = None,
    ) -> None:
        if event_manager is None:
            event_manager = hooks
        self.gateways = gateways
        self.events = event_manager
        self.logger = get_logger("persistence.manager")
        self.unit_of_work = UnitOfWork(
            gateways,
            event_manager,
            observer=observer,
            session=self,
            slow_call_ms=slow_call_ms,
        )

    # ------------------------------------------------------------------ #
    # Context management
    # ------------------------------------------------------------------ #
    def __enter__(self) -> "EntityManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type:
            self.clear()
        else:
            self.flush()

    # ------------------------------------------------------------------ #
    def persist(self, entity: Any) -> None:
        self.unit_of_work.persist(entity)

    def remove(self, entity: Any) -> None:
        self.unit_of_work.delete(entity)

    def flush(self, entity: Any = None) -> None:
        self.unit_of_work.commit(entity)

    def clear(self, entity: Any = None) -> None:
        self.unit_of_work.clear(entity)

    def contains(self, entity: Any) -> bool:
        uow = self.unit_of_work
        return uow.is_entity_scheduled(entity) and not uow.is_scheduled_for_delete(entity)

    def entity_state(self, entity: Any) -> EntityState:
        return self.unit_of_work.entity_state(entity)

    def get_gateway(self, type_tag: type) -> Gateway:
        return self.unit_of_work.gateway_for(type_tag)

    # ------------------------------------------------------------------ #
    @contextmanager
    def transaction(self) -> Iterator["EntityManager"]:
        """
        Flush on normal exit; on error drop all bookkeeping and re-raise.
        """

        try:
            yield self
        except Exception:
            self.logger.warning("Discarding %s scheduled entities after error", len(self.unit_of_work))
            self.clear()
            raise
        self.flush()

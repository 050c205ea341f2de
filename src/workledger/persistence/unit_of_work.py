"""
Unit of Work tracking entity state and batching writes until commit.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

from ..core.entity import is_entity, natural_identity_of, type_tag_of
from ..errors import InvalidArgument, InvalidOperation
from ..gateways.base import Gateway, GatewayFactory
from ..hooks import (
    EventManager,
    Events,
    OnClearEventArgs,
    OnFlushEventArgs,
    PostFlushEventArgs,
    PreFlushEventArgs,
)
from ..utils import get_logger, resolve_slow_call_ms, time_call
from .identity import IdentityRegistry
from .observer import TransactionObserver
from .state import EntityState

if TYPE_CHECKING:
    from .manager import EntityManager


class UnitOfWork:
    """
    Schedules inserts, updates and deletions and replays them against the
    gateways on :meth:`commit`.

    Every scheduled entity sits in exactly one of three maps keyed by its
    identity token. ``commit_order`` records the type tag of every ``persist``
    and ``delete`` call, duplicates included; inserts and updates run in that
    order and deletions run in reverse.
    """

    def __init__(
        self,
        gateways: GatewayFactory,
        event_manager: Optional[EventManager] = None,
        *,
        observer: Optional[TransactionObserver] = None,
        session: Optional["EntityManager"] = None,
        slow_call_ms: Optional[int] = None,
    ) -> None:
        self.gateways = gateways
        self.events = event_manager if event_manager is not None else EventManager()
        self.observer = observer if observer is not None else TransactionObserver()
        self.session = session
        self.identities = IdentityRegistry()
        self.slow_call_ms = resolve_slow_call_ms(default=100, override=slow_call_ms)
        self.logger = get_logger("persistence.unit_of_work")

        self._insertions: Dict[int, Any] = {}
        self._updates: Dict[int, Any] = {}
        self._deletions: Dict[int, Any] = {}
        self._commit_order: List[type] = []

    def __repr__(self) -> str:
        return (
            f"<UnitOfWork insertions={len(self._insertions)} updates={len(self._updates)} "
            f"deletions={len(self._deletions)} commit_order={len(self._commit_order)}>"
        )

    def __len__(self) -> int:
        return len(self._insertions) + len(self._updates) + len(self._deletions)

    # ------------------------------------------------------------------ #
    # Views
    # ------------------------------------------------------------------ #
    @property
    def commit_order(self) -> List[type]:
        return list(self._commit_order)

    @property
    def insertions(self) -> List[Any]:
        return list(self._insertions.values())

    @property
    def updates(self) -> List[Any]:
        return list(self._updates.values())

    @property
    def deletions(self) -> List[Any]:
        return list(self._deletions.values())

    def gateway_for(self, type_tag: type) -> Gateway:
        return self.gateways.gateway_for(type_tag)

    # ------------------------------------------------------------------ #
    # State classification
    # ------------------------------------------------------------------ #
    def entity_state(self, entity: Any) -> EntityState:
        token = self.identities.lookup(entity)
        if token is not None:
            if token in self._deletions:
                return EntityState.DELETED
            if token in self._insertions or token in self._updates:
                return EntityState.MANAGED

        identity = natural_identity_of(entity)
        if identity:
            gateway = self.gateway_for(type_tag_of(entity))
            if gateway.load_by_identity({"_id": identity}):
                return EntityState.DETACHED
        return EntityState.NEW

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #
    def persist(self, entity: Any) -> None:
        self._require_entity(entity, "persist")
        state = self.entity_state(entity)
        if state is EntityState.DETACHED:
            self.schedule_for_update(entity)
        else:
            token = self.identities.token_for(entity)
            self._insertions.pop(token, None)
            self._updates.pop(token, None)
            self.schedule_for_insert(entity)
        self._commit_order.append(type_tag_of(entity))
        self.logger.debug("Persisted %r as %s", entity, state.name)

    def delete(self, entity: Any) -> None:
        self._require_entity(entity, "delete")
        self.schedule_for_delete(entity)
        self._commit_order.append(type_tag_of(entity))
        self.logger.debug("Scheduled %r for deletion", entity)

    def schedule_for_insert(self, entity: Any) -> None:
        token = self.identities.token_for(entity)
        if token in self._updates:
            raise InvalidOperation("dirty entity cannot be scheduled for insertion", entity)
        if token in self._deletions:
            raise InvalidOperation("cannot insert a removed entity", entity)
        if token in self._insertions:
            raise InvalidOperation("entity already scheduled for insert", entity)
        self._insertions[token] = entity

    def schedule_for_update(self, entity: Any) -> None:
        token = self.identities.token_for(entity)
        if token in self._deletions:
            raise InvalidOperation("entity is removed", entity)
        if token not in self._updates and token not in self._insertions:
            self._updates[token] = entity

    def schedule_for_delete(self, entity: Any) -> None:
        token = self.identities.token_for(entity)
        self._insertions.pop(token, None)
        self._updates.pop(token, None)
        if token not in self._deletions:
            self._deletions[token] = entity

    # Predicates ---------------------------------------------------------
    def is_scheduled_for_insert(self, entity: Any) -> bool:
        return self._scheduled_in(self._insertions, entity)

    def is_scheduled_for_update(self, entity: Any) -> bool:
        return self._scheduled_in(self._updates, entity)

    def is_scheduled_for_delete(self, entity: Any) -> bool:
        return self._scheduled_in(self._deletions, entity)

    def is_entity_scheduled(self, entity: Any) -> bool:
        token = self.identities.lookup(entity)
        if token is None:
            return False
        return token in self._insertions or token in self._updates or token in self._deletions

    # ------------------------------------------------------------------ #
    # Commit
    # ------------------------------------------------------------------ #
    def commit(self, entity: Any = None) -> None:
        counts = (len(self._insertions), len(self._updates), len(self._deletions))
        try:
            if self.events.has_listeners(Events.PRE_FLUSH):
                self.events.dispatch(Events.PRE_FLUSH, PreFlushEventArgs(self.session))
            self.events.dispatch(Events.ON_FLUSH, OnFlushEventArgs(self.session))

            commit_order = self.commit_order

            if self._insertions:
                with time_call("unit_of_work.inserts", self.logger, threshold_ms=self.slow_call_ms):
                    for type_tag in commit_order:
                        self.execute_inserts(type_tag)

            if self._updates:
                with time_call("unit_of_work.updates", self.logger, threshold_ms=self.slow_call_ms):
                    for type_tag in commit_order:
                        self.execute_updates(type_tag)

            if self._deletions:
                with time_call("unit_of_work.deletions", self.logger, threshold_ms=self.slow_call_ms):
                    for type_tag in reversed(commit_order):
                        if not self._deletions:
                            break
                        self.execute_deletions(type_tag)
        except Exception as exc:
            self.observer.after_transaction_rolled_back(self, exc)
            self.logger.warning(
                "Commit failed with %s; %s insertion(s), %s update(s), %s deletion(s) still scheduled",
                type(exc).__name__,
                len(self._insertions),
                len(self._updates),
                len(self._deletions),
            )
            raise

        self.observer.after_transaction_complete(self)
        self.events.dispatch(Events.POST_FLUSH, PostFlushEventArgs(self.session))
        self.logger.info(
            "Committed %s insertion(s), %s update(s), %s deletion(s)", *counts
        )
        self.clear(entity)

    def execute_inserts(self, type_tag: type) -> None:
        gateway = self.gateway_for(type_tag)
        for token in self._tokens_of(self._insertions, type_tag):
            entity = self._insertions[token]
            gateway.add_insert(entity)
            del self._insertions[token]
            self._release(token, entity)
        gateway.execute_inserts()

    def execute_updates(self, type_tag: type) -> None:
        gateway = self.gateway_for(type_tag)
        for token in self._tokens_of(self._updates, type_tag):
            entity = self._updates[token]
            gateway.update(entity)
            del self._updates[token]
            self._release(token, entity)

    def execute_deletions(self, type_tag: type) -> None:
        gateway = self.gateway_for(type_tag)
        for token in self._tokens_of(self._deletions, type_tag):
            entity = self._deletions[token]
            gateway.delete(entity)
            del self._deletions[token]
            self._release(token, entity)

    # ------------------------------------------------------------------ #
    # Clearing
    # ------------------------------------------------------------------ #
    def clear(self, entity: Any = None) -> None:
        if entity is None:
            self._insertions.clear()
            self._updates.clear()
            self._deletions.clear()
            self._commit_order.clear()
            self.identities.clear()
            entity_type = None
        else:
            token = self.identities.lookup(entity)
            if token is not None:
                self._insertions.pop(token, None)
                self._updates.pop(token, None)
                self._deletions.pop(token, None)
                self.identities.forget(entity)
            entity_type = type_tag_of(entity)

        self.events.dispatch(Events.ON_CLEAR, OnClearEventArgs(self.session, entity_type))

    # ------------------------------------------------------------------ #
    def _release(self, token: int, entity: Any) -> None:
        if token not in self._insertions and token not in self._updates and token not in self._deletions:
            self.identities.forget(entity)

    def _scheduled_in(self, schedule: Dict[int, Any], entity: Any) -> bool:
        token = self.identities.lookup(entity)
        return token is not None and token in schedule

    @staticmethod
    def _tokens_of(schedule: Dict[int, Any], type_tag: type) -> List[int]:
        return [token for token, entity in schedule.items() if type_tag_of(entity) is type_tag]

    @staticmethod
    def _require_entity(entity: Any, operation: str) -> None:
        if not is_entity(entity):
            raise InvalidArgument(f"Cannot {operation} a non-entity value: {entity!r}")

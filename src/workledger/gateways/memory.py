"""
Dictionary-backed document store and gateway.
"""

from __future__ import annotations

import copy
import uuid
from collections import defaultdict
from threading import RLock
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..core.entity import IDENTITY_FIELD, assign_identity, natural_identity_of, to_document
from ..errors import StoreExecutionError
from ..utils import get_logger


class InMemoryStore:
    """
    Holds documents per type tag and hands out gateways bound to it.

    Every write is appended to ``journal`` as ``(operation, type name, _id)``.
    """

    def __init__(self) -> None:
        self._documents: Dict[type, Dict[Any, Dict[str, Any]]] = defaultdict(dict)
        self._lock = RLock()
        self.journal: List[Tuple[str, str, Any]] = []
        self.logger = get_logger("gateways.memory")

    def gateway_for(self, type_tag: type) -> "InMemoryGateway":
        return InMemoryGateway(self, type_tag)

    def get(self, type_tag: type, identity: Any) -> Optional[Dict[str, Any]]:
        with self._lock:
            document = self._documents.get(type_tag, {}).get(identity)
            return copy.deepcopy(document) if document is not None else None

    def put(self, type_tag: type, identity: Any, document: Dict[str, Any], *, operation: str) -> None:
        with self._lock:
            self._documents[type_tag][identity] = copy.deepcopy(document)
            self.journal.append((operation, type_tag.__name__, identity))

    def remove(self, type_tag: type, identity: Any) -> None:
        with self._lock:
            del self._documents[type_tag][identity]
            self.journal.append(("delete", type_tag.__name__, identity))

    def contains(self, type_tag: type, identity: Any) -> bool:
        with self._lock:
            return identity in self._documents.get(type_tag, {})

    def count(self, type_tag: type) -> int:
        with self._lock:
            return len(self._documents.get(type_tag, {}))

    def clear(self) -> None:
        with self._lock:
            self._documents.clear()
            self.journal.clear()


class InMemoryGateway:
    """
    Gateway for one type tag on top of an :class:`InMemoryStore`.
    """

    def __init__(self, store: InMemoryStore, type_tag: type) -> None:
        self.store = store
        self.type_tag = type_tag
        self._pending: List[Any] = []

    def load_by_identity(self, criteria: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        identity = criteria.get(IDENTITY_FIELD)
        if not identity:
            return None
        document = self.store.get(self.type_tag, identity)
        if document is None:
            return None
        document[IDENTITY_FIELD] = identity
        return document

    def add_insert(self, entity: Any) -> None:
        self._pending.append(entity)

    def execute_inserts(self) -> None:
        pending, self._pending = self._pending, []
        for entity in pending:
            identity = natural_identity_of(entity)
            if not identity:
                identity = uuid.uuid4().hex
                assign_identity(entity, identity)
            elif self.store.contains(self.type_tag, identity):
                raise StoreExecutionError(
                    f"{self.type_tag.__name__} with _id {identity!r} already exists"
                )
            self.store.put(self.type_tag, identity, to_document(entity), operation="insert")
        if pending:
            self.store.logger.debug(
                "Inserted %s %s document(s)", len(pending), self.type_tag.__name__
            )

    def update(self, entity: Any) -> None:
        identity = self._require_identity(entity, "update")
        self.store.put(self.type_tag, identity, to_document(entity), operation="update")

    def delete(self, entity: Any) -> None:
        identity = self._require_identity(entity, "delete")
        self.store.remove(self.type_tag, identity)

    def _require_identity(self, entity: Any, operation: str) -> Any:
        identity = natural_identity_of(entity)
        if not identity:
            raise StoreExecutionError(
                f"Cannot {operation} {self.type_tag.__name__} without an _id"
            )
        if not self.store.contains(self.type_tag, identity):
            raise StoreExecutionError(
                f"Cannot {operation} missing {self.type_tag.__name__} with _id {identity!r}"
            )
        return identity

"""
Test doubles shared across the suite.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Set, Tuple

from workledger.errors import StoreExecutionError


class RecordingGateway:
    """Gateway double that journals every call into a shared list."""

    def __init__(self, factory: "RecordingFactory", type_tag: type) -> None:
        self.factory = factory
        self.type_tag = type_tag

    def load_by_identity(self, criteria):
        self.factory.calls.append(("load", self.type_tag.__name__, criteria["_id"]))
        return self.factory.known.get((self.type_tag, criteria["_id"]))

    def add_insert(self, entity):
        self._record("add_insert", entity)

    def execute_inserts(self):
        self.factory.calls.append(("execute_inserts", self.type_tag.__name__, None))

    def update(self, entity):
        self._record("update", entity)

    def delete(self, entity):
        self._record("delete", entity)

    def _record(self, operation: str, entity: Any) -> None:
        if (operation, id(entity)) in self.factory.failures:
            raise StoreExecutionError(f"{operation} failed for {entity!r}")
        self.factory.calls.append((operation, self.type_tag.__name__, entity))


class RecordingFactory:
    def __init__(self) -> None:
        self.calls: List[Tuple[str, str, Any]] = []
        self.known: Dict[Tuple[type, Any], Dict[str, Any]] = {}
        self.failures: Set[Tuple[str, int]] = set()
        self.requested: List[type] = []
        self._gateways: Dict[type, RecordingGateway] = {}

    def gateway_for(self, type_tag: type) -> RecordingGateway:
        self.requested.append(type_tag)
        gateway = self._gateways.get(type_tag)
        if gateway is None:
            gateway = self._gateways[type_tag] = RecordingGateway(self, type_tag)
        return gateway

    def add_existing(self, type_tag: type, identity: Any, **document: Any) -> None:
        self.known[(type_tag, identity)] = dict(document, _id=identity)

    def fail(self, operation: str, entity: Any) -> None:
        self.failures.add((operation, id(entity)))

    def writes(self) -> List[Tuple[str, str, Any]]:
        return [call for call in self.calls if call[0] != "load"]


class Article:
    def __init__(self, title: str = "", _id: Optional[str] = None) -> None:
        self._id = _id
        self.title = title

    def __repr__(self) -> str:
        return f"<Article {self.title!r}>"


class Comment:
    def __init__(self, body: str = "", _id: Optional[str] = None) -> None:
        self._id = _id
        self.body = body

    def __repr__(self) -> str:
        return f"<Comment {self.body!r}>"


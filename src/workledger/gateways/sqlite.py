"""
SQLite document store: one JSON document table per type tag.
"""

from __future__ import annotations

import json
import sqlite3
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set

from ..core.entity import IDENTITY_FIELD, assign_identity, natural_identity_of, to_document
from ..errors import StoreConfigurationError, StoreExecutionError
from ..utils import get_logger, resolve_slow_call_ms, table_name_for, time_call
from .base import StoreConfig


@dataclass(slots=True)
class SQLiteConnectionState:
    connection: sqlite3.Connection


class SQLiteStore:
    """
    Owns the sqlite3 connection and creates document tables on demand.
    """

    def __init__(self, config: StoreConfig | str, *, slow_call_ms: int | None = None) -> None:
        if isinstance(config, str):
            config = StoreConfig.from_url(config)
        if config.scheme != "sqlite":
            raise StoreConfigurationError(
                f"SQLiteStore cannot open {config.descriptive_label()}"
            )
        self.config = config
        self.slow_call_ms = resolve_slow_call_ms(default=100, override=slow_call_ms)
        self.logger = get_logger("gateways.sqlite")
        self._state: SQLiteConnectionState | None = None
        self._tables: Set[str] = set()

    # ------------------------------------------------------------------ #
    # Connection management
    # ------------------------------------------------------------------ #
    def connect(self) -> sqlite3.Connection:
        if self._state:
            return self._state.connection
        path = self._normalize_path(self.config.url)
        timeout = self.config.timeout if self.config.timeout is not None else 5.0
        try:
            connection = sqlite3.connect(
                path,
                isolation_level=None if self.config.autocommit else "",
                timeout=timeout,
                check_same_thread=False,
            )
        except sqlite3.Error as exc:
            raise StoreConfigurationError(
                f"Unable to open {self.config.descriptive_label()}: {exc}"
            ) from exc
        connection.row_factory = sqlite3.Row
        self._state = SQLiteConnectionState(connection)
        return connection

    def close(self) -> None:
        if self._state:
            self._state.connection.close()
            self._state = None
            self._tables.clear()

    def __enter__(self) -> "SQLiteStore":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def gateway_for(self, type_tag: type) -> "SQLiteGateway":
        return SQLiteGateway(self, type_tag)

    # ------------------------------------------------------------------ #
    # Execution helpers
    # ------------------------------------------------------------------ #
    def ensure_table(self, table: str) -> None:
        if table in self._tables:
            return
        self.execute(
            f'CREATE TABLE IF NOT EXISTS "{table}" ("_id" TEXT PRIMARY KEY, "document" TEXT NOT NULL)'
        )
        self._tables.add(table)

    def execute(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        connection = self.connect()
        try:
            with time_call("sqlite.execute", self.logger, threshold_ms=self.slow_call_ms, sql=sql):
                cursor = connection.execute(sql, params)
            if connection.in_transaction:
                connection.commit()
        except sqlite3.Error as exc:
            self._rollback_quietly(connection)
            raise StoreExecutionError(f"SQLite statement failed: {exc}") from exc
        return cursor

    def executemany(self, sql: str, seq_of_params: Sequence[Sequence[Any]]) -> sqlite3.Cursor:
        connection = self.connect()
        try:
            # batches stay atomic under autocommit too
            if not connection.in_transaction:
                connection.execute("BEGIN")
            with time_call("sqlite.executemany", self.logger, threshold_ms=self.slow_call_ms, sql=sql):
                cursor = connection.executemany(sql, seq_of_params)
            if connection.in_transaction:
                connection.commit()
        except sqlite3.Error as exc:
            self._rollback_quietly(connection)
            raise StoreExecutionError(f"SQLite batch failed: {exc}") from exc
        return cursor

    def _rollback_quietly(self, connection: sqlite3.Connection) -> None:
        if not connection.in_transaction:
            return
        try:
            connection.rollback()
        except sqlite3.Error:
            self.logger.exception("Rollback after failed statement did not succeed")

    @staticmethod
    def _normalize_path(url: str) -> str:
        if url == "sqlite:///:memory:":
            return ":memory:"
        prefix = "sqlite:///"
        if url.startswith(prefix):
            return url[len(prefix) :]
        return url


class SQLiteGateway:
    """
    Gateway for one type tag, storing entities as JSON documents.
    """

    def __init__(self, store: SQLiteStore, type_tag: type) -> None:
        self.store = store
        self.type_tag = type_tag
        self.table = table_name_for(type_tag)
        self._pending: List[Any] = []

    def load_by_identity(self, criteria: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        identity = criteria.get(IDENTITY_FIELD)
        if not identity:
            return None
        self.store.ensure_table(self.table)
        row = self.store.execute(
            f'SELECT "_id", "document" FROM "{self.table}" WHERE "_id" = ? LIMIT 1',
            (str(identity),),
        ).fetchone()
        if row is None:
            return None
        document = json.loads(row["document"])
        document[IDENTITY_FIELD] = row["_id"]
        return document

    def add_insert(self, entity: Any) -> None:
        self._pending.append(entity)

    def execute_inserts(self) -> None:
        if not self._pending:
            return
        pending, self._pending = self._pending, []
        rows = []
        for entity in pending:
            identity = natural_identity_of(entity)
            if not identity:
                identity = uuid.uuid4().hex
                assign_identity(entity, identity)
            rows.append((str(identity), self._encode(entity)))
        self.store.ensure_table(self.table)
        self.store.executemany(
            f'INSERT INTO "{self.table}" ("_id", "document") VALUES (?, ?)', rows
        )

    def update(self, entity: Any) -> None:
        identity = self._require_identity(entity, "update")
        self.store.ensure_table(self.table)
        cursor = self.store.execute(
            f'UPDATE "{self.table}" SET "document" = ? WHERE "_id" = ?',
            (self._encode(entity), str(identity)),
        )
        if cursor.rowcount == 0:
            raise StoreExecutionError(
                f"Cannot update missing {self.type_tag.__name__} with _id {identity!r}"
            )

    def delete(self, entity: Any) -> None:
        identity = self._require_identity(entity, "delete")
        self.store.ensure_table(self.table)
        cursor = self.store.execute(
            f'DELETE FROM "{self.table}" WHERE "_id" = ?', (str(identity),)
        )
        if cursor.rowcount == 0:
            raise StoreExecutionError(
                f"Cannot delete missing {self.type_tag.__name__} with _id {identity!r}"
            )

    def count(self) -> int:
        self.store.ensure_table(self.table)
        return self.store.execute(f'SELECT COUNT(*) FROM "{self.table}"').fetchone()[0]

    def _require_identity(self, entity: Any, operation: str) -> Any:
        identity = natural_identity_of(entity)
        if not identity:
            raise StoreExecutionError(
                f"Cannot {operation} {self.type_tag.__name__} without an _id"
            )
        return identity

    @staticmethod
    def _encode(entity: Any) -> str:
        try:
            return json.dumps(to_document(entity), sort_keys=True, default=str)
        except (TypeError, ValueError) as exc:
            raise StoreExecutionError(f"Cannot serialize {entity!r}: {exc}") from exc

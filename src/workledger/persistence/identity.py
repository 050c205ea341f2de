"""
Identity registry handing out a stable token per tracked instance.
"""

from __future__ import annotations

import itertools
from threading import RLock
from typing import Any, Dict, Optional, Tuple


class IdentityRegistry:
    """
    Maps live instances to integer tokens.

    Tokens depend only on the instance, never on its field values, so equal or
    unhashable objects still get distinct keys. Registered instances are held
    until forgotten so their ``id()`` cannot be recycled while tracked.
    """

    def __init__(self) -> None:
        self._tokens: Dict[int, Tuple[int, Any]] = {}
        self._counter = itertools.count(1)
        self._lock = RLock()

    def token_for(self, entity: Any) -> int:
        key = id(entity)
        with self._lock:
            entry = self._tokens.get(key)
            if entry is None:
                entry = (next(self._counter), entity)
                self._tokens[key] = entry
            return entry[0]

    def lookup(self, entity: Any) -> Optional[int]:
        with self._lock:
            entry = self._tokens.get(id(entity))
            return entry[0] if entry is not None else None

    def forget(self, entity: Any) -> None:
        with self._lock:
            self._tokens.pop(id(entity), None)

    def clear(self) -> None:
        with self._lock:
            self._tokens.clear()

    def __contains__(self, entity: Any) -> bool:
        return self.lookup(entity) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

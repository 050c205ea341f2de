"""
Thresholds for slow gateway call reporting.
"""

from __future__ import annotations

import os

from ..errors import StoreConfigurationError

SLOW_CALL_ENV = "WORKLEDGER_SLOW_CALL_MS"


def _parse_threshold(value: str, *, key: str) -> int:
    try:
        threshold = int(value)
    except ValueError as exc:
        raise StoreConfigurationError(f"Invalid integer value for '{key}': {value!r}") from exc
    if threshold < 0:
        raise StoreConfigurationError(f"'{key}' must not be negative, got {threshold}")
    return threshold


def resolve_slow_call_ms(default: int = 100, override: int | None = None) -> int:
    """
    Pick the slow-call threshold: explicit override, then environment, then default.
    """
    if override is not None:
        return override
    raw = os.getenv(SLOW_CALL_ENV)
    if raw is None or not raw.strip():
        return default
    return _parse_threshold(raw.strip(), key=SLOW_CALL_ENV)

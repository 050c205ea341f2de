"""Structured logging helpers for WorkLedger."""

from __future__ import annotations

import logging
import os
import time
import uuid
from contextvars import ContextVar
from typing import Optional

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)

LOG_LEVEL_ENV = "WORKLEDGER_LOG_LEVEL"


class CorrelationIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id()
        return True


def resolve_log_level(default: int = logging.INFO) -> int:
    raw = os.getenv(LOG_LEVEL_ENV)
    if not raw:
        return default
    raw = raw.strip()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    if isinstance(level, int):
        return level
    raise ValueError(f"Invalid log level in {LOG_LEVEL_ENV}: {raw!r}")


def configure_logging(level: int | None = None) -> None:
    logger = logging.getLogger("workledger")
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(correlation_id)s | %(name)s | %(message)s"
    )
    handler.setFormatter(formatter)
    handler.addFilter(CorrelationIdFilter())
    logger.addHandler(handler)
    logger.setLevel(level if level is not None else resolve_log_level())


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(f"workledger.{name}")


def set_correlation_id(value: Optional[str] = None) -> str:
    token = value or str(uuid.uuid4())
    _correlation_id.set(token)
    return token


def get_correlation_id() -> str:
    cid = _correlation_id.get()
    if cid is None:
        cid = set_correlation_id()
    return cid


def time_call(name: str, logger: logging.Logger, *, threshold_ms: int = 100, **details):
    start = time.monotonic()

    class Timer:
        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            elapsed_ms = (time.monotonic() - start) * 1000
            level = logging.WARNING if elapsed_ms >= threshold_ms else logging.DEBUG
            extra = {"elapsed_ms": elapsed_ms, **details}
            logger.log(level, "%s took %.2fms", name, elapsed_ms, extra=extra)

    return Timer()

"""
Utility helpers shared across WorkLedger packages.
"""

from .logging import configure_logging, get_logger, time_call
from .naming import camel_to_snake, table_name_for
from .performance import resolve_slow_call_ms

__all__ = [
    "camel_to_snake",
    "configure_logging",
    "get_logger",
    "resolve_slow_call_ms",
    "table_name_for",
    "time_call",
]

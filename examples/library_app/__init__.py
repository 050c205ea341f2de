"""
Library-style sample application showcasing WorkLedger.
"""

from .demo import (  # noqa: F401
    bootstrap_manager,
    fetch_catalog,
    lend_book,
    return_book,
    run_demo,
    seed_sample_data,
)
from .models import Book, LoanRecord, Writer  # noqa: F401

__all__ = [
    "Book",
    "LoanRecord",
    "Writer",
    "bootstrap_manager",
    "fetch_catalog",
    "lend_book",
    "return_book",
    "run_demo",
    "seed_sample_data",
]

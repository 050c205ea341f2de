"""
Domain objects for the WorkLedger library example.
"""

from __future__ import annotations

from workledger import Entity


class Writer(Entity):
    pass


class Book(Entity):
    class Meta:
        table = "library_book"


class LoanRecord:
    """Plain object without a base class; tracked through its ``_id`` attribute."""

    def __init__(self, book_id: str, borrower: str) -> None:
        self._id = None
        self.book_id = book_id
        self.borrower = borrower

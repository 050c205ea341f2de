"""
Library example: writers, books and loans persisted to SQLite through an EntityManager.
"""

from __future__ import annotations

from typing import Any, Dict, List

from workledger import EntityManager, EventManager, Events, SQLiteStore

from .models import Book, LoanRecord, Writer


def bootstrap_manager(dsn: str = "sqlite:///:memory:") -> EntityManager:
    store = SQLiteStore(dsn)
    store.connect()
    return EntityManager(store, event_manager=EventManager())


def seed_sample_data(manager: EntityManager) -> Dict[str, List[Dict[str, Any]]]:
    writers = [
        Writer(name="Octavia Butler", country="USA"),
        Writer(name="Haruki Murakami", country="Japan"),
    ]
    with manager.transaction():
        for writer in writers:
            manager.persist(writer)

    # Writers now carry store identities the books can reference.
    books = [
        Book(title="Kindred", writer_id=writers[0].get_id(), available=True),
        Book(title="Kafka on the Shore", writer_id=writers[1].get_id(), available=True),
    ]
    with manager.transaction():
        for book in books:
            manager.persist(book)

    return {
        "writers": [dict(writer.to_dict(), _id=writer.get_id()) for writer in writers],
        "books": [dict(book.to_dict(), _id=book.get_id()) for book in books],
    }


def lend_book(manager: EntityManager, book_id: str, borrower: str) -> LoanRecord:
    """
    Record a loan and mark the book unavailable in a single flush.
    """

    stored = manager.get_gateway(Book).load_by_identity({"_id": book_id})
    if stored is None:
        raise LookupError(f"Unknown book {book_id!r}")
    book = Book(_id=book_id, **{key: value for key, value in stored.items() if key != "_id"})
    book.available = False
    loan = LoanRecord(book_id=book_id, borrower=borrower)
    with manager.transaction():
        manager.persist(book)
        manager.persist(loan)
    return loan


def return_book(manager: EntityManager, loan: LoanRecord) -> None:
    stored = manager.get_gateway(Book).load_by_identity({"_id": loan.book_id})
    if stored is None:
        raise LookupError(f"Unknown book {loan.book_id!r}")
    book = Book(_id=loan.book_id, **{key: value for key, value in stored.items() if key != "_id"})
    book.available = True
    with manager.transaction():
        manager.persist(book)
        manager.remove(loan)


def fetch_catalog(manager: EntityManager, book_ids: List[str]) -> List[Dict[str, Any]]:
    books = manager.get_gateway(Book)
    writers = manager.get_gateway(Writer)
    catalog: List[Dict[str, Any]] = []
    for book_id in book_ids:
        book = books.load_by_identity({"_id": book_id})
        if book is None:
            continue
        writer = writers.load_by_identity({"_id": book["writer_id"]}) or {}
        catalog.append(
            {
                "title": book["title"],
                "writer": writer.get("name"),
                "available": book["available"],
            }
        )
    return catalog


def run_demo(dsn: str = "sqlite:///:memory:") -> Dict[str, Any]:
    """
    Seed the store, lend a book, and return the catalog plus the flush log.
    """

    manager = bootstrap_manager(dsn)
    flushes: List[str] = []
    manager.events.register(Events.POST_FLUSH, lambda args: flushes.append("post_flush"))
    try:
        seeded = seed_sample_data(manager)
        book_ids = [book["_id"] for book in seeded["books"]]
        loan = lend_book(manager, book_ids[0], borrower="Ada")
        return {
            "catalog": fetch_catalog(manager, book_ids),
            "loan_id": loan._id,
            "flushes": flushes,
        }
    finally:
        manager.gateways.close()


if __name__ == "__main__":
    result = run_demo("sqlite:///library_demo.db")
    for entry in result["catalog"]:
        status = "available" if entry["available"] else "on loan"
        print(f"{entry['title']} by {entry['writer']} ({status})")

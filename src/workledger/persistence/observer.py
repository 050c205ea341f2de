"""
Transaction observers notified when a commit completes or fails.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, List, Optional

if TYPE_CHECKING:
    from .unit_of_work import UnitOfWork


class TransactionObserver:
    """
    No-op observer. Subclass and override the hooks you need.
    """

    def after_transaction_complete(self, unit_of_work: "UnitOfWork") -> None:
        return None

    def after_transaction_rolled_back(self, unit_of_work: "UnitOfWork", error: BaseException) -> None:
        return None


class CallbackObserver(TransactionObserver):
    """
    Observer built from optional plain callables.
    """

    def __init__(
        self,
        *,
        on_complete: Optional[Callable[["UnitOfWork"], None]] = None,
        on_rollback: Optional[Callable[["UnitOfWork", BaseException], None]] = None,
    ) -> None:
        self.on_complete = on_complete
        self.on_rollback = on_rollback

    def after_transaction_complete(self, unit_of_work: "UnitOfWork") -> None:
        if self.on_complete is not None:
            self.on_complete(unit_of_work)

    def after_transaction_rolled_back(self, unit_of_work: "UnitOfWork", error: BaseException) -> None:
        if self.on_rollback is not None:
            self.on_rollback(unit_of_work, error)


class CompositeObserver(TransactionObserver):
    """Fans each notification out to several observers in order."""

    def __init__(self, *observers: TransactionObserver) -> None:
        self.observers: List[TransactionObserver] = list(observers)

    def add(self, observer: TransactionObserver) -> None:
        self.observers.append(observer)

    def after_transaction_complete(self, unit_of_work: "UnitOfWork") -> None:
        for observer in self.observers:
            observer.after_transaction_complete(unit_of_work)

    def after_transaction_rolled_back(self, unit_of_work: "UnitOfWork", error: BaseException) -> None:
        for observer in self.observers:
            observer.after_transaction_rolled_back(unit_of_work, error)

import pytest

from doubles import Article
from workledger import StoreExecutionError
from workledger.persistence import CallbackObserver, CompositeObserver, TransactionObserver, UnitOfWork


def test_default_observer_hooks_are_noops(uow):
    observer = TransactionObserver()

    assert observer.after_transaction_complete(uow) is None
    assert observer.after_transaction_rolled_back(uow, RuntimeError()) is None


def test_callback_observer_with_missing_callbacks():
    observer = CallbackObserver(on_complete=None)

    observer.after_transaction_complete(None)
    observer.after_transaction_rolled_back(None, RuntimeError())


def test_composite_observer_fans_out_in_order(gateways, events):
    calls = []
    composite = CompositeObserver(
        CallbackObserver(on_complete=lambda uow: calls.append("first")),
    )
    composite.add(
        CallbackObserver(
            on_complete=lambda uow: calls.append("second"),
            on_rollback=lambda uow, error: calls.append(("rollback", str(error))),
        )
    )
    uow = UnitOfWork(gateways, events, observer=composite)

    uow.commit()
    assert calls == ["first", "second"]

    article = Article("bad")
    uow.persist(article)
    gateways.fail("add_insert", article)
    with pytest.raises(StoreExecutionError):
        uow.commit()

    assert calls[-1] == ("rollback", "add_insert failed for <Article 'bad'>")

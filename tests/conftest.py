import pytest

from doubles import RecordingFactory
from workledger.hooks import EventManager, hooks
from workledger.persistence import UnitOfWork


@pytest.fixture(autouse=True)
def clear_hooks():
    hooks.clear()
    yield
    hooks.clear()


@pytest.fixture
def gateways() -> RecordingFactory:
    return RecordingFactory()


@pytest.fixture
def events() -> EventManager:
    return EventManager()


@pytest.fixture
def uow(gateways, events) -> UnitOfWork:
    return UnitOfWork(gateways, events)

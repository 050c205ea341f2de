import pytest

from workledger import Entity, EntityManager, EntityState, Events, InMemoryStore, hooks
from workledger.hooks import EventManager


class User(Entity):
    pass


class Profile(Entity):
    pass


@pytest.fixture
def store():
    return InMemoryStore()


def test_manager_uses_global_hooks_by_default(store):
    manager = EntityManager(store)
    seen = []
    hooks.register(Events.PRE_FLUSH, seen.append)

    manager.flush()

    assert manager.events is hooks
    assert seen[0].session is manager


def test_persist_and_flush_round_trip(store):
    manager = EntityManager(store, event_manager=EventManager())
    user = User(name="Alice", age=30)

    manager.persist(user)
    assert manager.contains(user)
    manager.flush()

    assert user.get_id()
    assert store.get(User, user.get_id()) == {"name": "Alice", "age": 30}
    assert not manager.contains(user)
    assert manager.entity_state(user) is EntityState.DETACHED


def test_update_and_remove_through_manager(store):
    manager = EntityManager(store, event_manager=EventManager())
    user = User(name="Bob")
    manager.persist(user)
    manager.flush()

    user.name = "Robert"
    manager.persist(user)
    manager.flush()
    assert store.get(User, user.get_id())["name"] == "Robert"

    manager.remove(user)
    assert not manager.contains(user)
    assert manager.entity_state(user) is EntityState.DELETED
    manager.flush()

    assert store.count(User) == 0
    assert [entry[0] for entry in store.journal] == ["insert", "update", "delete"]


def test_transaction_context_flushes_on_success(store):
    manager = EntityManager(store, event_manager=EventManager())

    with manager.transaction():
        manager.persist(User(name="Eve"))
        manager.persist(Profile(bio="hi"))

    assert store.count(User) == 1
    assert store.count(Profile) == 1


def test_transaction_context_discards_schedule_on_error(store):
    manager = EntityManager(store, event_manager=EventManager())

    with pytest.raises(ValueError):
        with manager.transaction():
            manager.persist(User(name="Mallory"))
            raise ValueError("abort")

    assert len(manager.unit_of_work) == 0
    assert store.count(User) == 0


def test_manager_as_context_manager(store):
    with EntityManager(store, event_manager=EventManager()) as manager:
        manager.persist(User(name="Carol"))

    assert store.count(User) == 1


def test_get_gateway_resolves_through_factory(store):
    manager = EntityManager(store, event_manager=EventManager())
    user = User(name="Dana")
    manager.persist(user)
    manager.flush()

    loaded = manager.get_gateway(User).load_by_identity({"_id": user.get_id()})

    assert loaded["name"] == "Dana"

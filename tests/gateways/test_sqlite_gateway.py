import sqlite3

import pytest

from workledger import (
    Entity,
    EntityManager,
    EntityState,
    SQLiteStore,
    StoreConfigurationError,
    StoreExecutionError,
)
from workledger.hooks import EventManager


class Note(Entity):
    pass


class Attachment(Entity):
    class Meta:
        table = "note_attachment"


@pytest.fixture
def store(tmp_path):
    store = SQLiteStore(f"sqlite:///{tmp_path / 'notes.db'}")
    store.connect()
    yield store
    store.close()


def test_connect_opens_sqlite_connection(tmp_path):
    store = SQLiteStore(f"sqlite:///{tmp_path / 'connect.db'}")
    assert isinstance(store.connect(), sqlite3.Connection)
    assert store.connect() is store.connect()
    store.close()


def test_non_sqlite_url_is_rejected():
    with pytest.raises(StoreConfigurationError):
        SQLiteStore("postgresql://localhost/db")


def test_batched_insert_assigns_identities_and_creates_table(store):
    gateway = store.gateway_for(Note)
    notes = [Note(text="one"), Note(text="two", _id="n-2")]
    for note in notes:
        gateway.add_insert(note)

    gateway.execute_inserts()

    assert gateway.count() == 2
    assert notes[0].get_id()
    assert notes[1].get_id() == "n-2"
    assert gateway.load_by_identity({"_id": "n-2"}) == {"text": "two", "_id": "n-2"}


def test_table_name_honours_meta(store):
    gateway = store.gateway_for(Attachment)
    gateway.add_insert(Attachment(name="a.txt"))
    gateway.execute_inserts()

    row = store.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?", ("note_attachment",)
    ).fetchone()
    assert row is not None


def test_duplicate_insert_raises_and_rolls_back_batch(store):
    gateway = store.gateway_for(Note)
    gateway.add_insert(Note(_id="dup"))
    gateway.execute_inserts()

    gateway.add_insert(Note(_id="fresh"))
    gateway.add_insert(Note(_id="dup"))
    with pytest.raises(StoreExecutionError) as excinfo:
        gateway.execute_inserts()

    assert isinstance(excinfo.value.__cause__, sqlite3.IntegrityError)
    assert gateway.load_by_identity({"_id": "fresh"}) is None
    assert gateway.count() == 1


def test_batch_is_atomic_with_autocommit(tmp_path):
    with SQLiteStore(f"sqlite:///{tmp_path / 'auto.db'}?autocommit=true") as store:
        gateway = store.gateway_for(Note)
        gateway.add_insert(Note(_id="x"))
        gateway.execute_inserts()

        gateway.add_insert(Note(_id="y"))
        gateway.add_insert(Note(_id="x"))
        with pytest.raises(StoreExecutionError):
            gateway.execute_inserts()

        assert not store.connect().in_transaction
        assert gateway.load_by_identity({"_id": "y"}) is None
        assert gateway.count() == 1


def test_update_and_delete_documents(store):
    gateway = store.gateway_for(Note)
    note = Note(text="draft", pinned=False)
    gateway.add_insert(note)
    gateway.execute_inserts()

    note.text = "final"
    note.pinned = True
    gateway.update(note)
    assert gateway.load_by_identity({"_id": note.get_id()}) == {
        "text": "final",
        "pinned": True,
        "_id": note.get_id(),
    }

    gateway.delete(note)
    assert gateway.load_by_identity({"_id": note.get_id()}) is None


@pytest.mark.parametrize("operation", ["update", "delete"])
def test_writes_to_missing_rows_raise(store, operation):
    gateway = store.gateway_for(Note)

    with pytest.raises(StoreExecutionError, match="missing"):
        getattr(gateway, operation)(Note(_id="ghost"))
    with pytest.raises(StoreExecutionError, match="without an _id"):
        getattr(gateway, operation)(Note())


def test_unserializable_document_raises(store):
    looped = []
    looped.append(looped)
    gateway = store.gateway_for(Note)
    gateway.add_insert(Note(payload=looped))

    with pytest.raises(StoreExecutionError, match="Cannot serialize"):
        gateway.execute_inserts()


def test_entity_manager_against_sqlite(tmp_path):
    with SQLiteStore(f"sqlite:///{tmp_path / 'manager.db'}") as store:
        manager = EntityManager(store, event_manager=EventManager())
        note = Note(text="hello")
        manager.persist(note)
        manager.flush()

        copy = Note(_id=note.get_id(), text="hello again")
        assert manager.entity_state(copy) is EntityState.DETACHED
        manager.persist(copy)
        manager.flush()

        assert store.gateway_for(Note).load_by_identity({"_id": note.get_id()})["text"] == "hello again"

        manager.remove(copy)
        manager.flush()
        assert store.gateway_for(Note).count() == 0


def test_store_survives_reopen(tmp_path):
    url = f"sqlite:///{tmp_path / 'reopen.db'}"
    with SQLiteStore(url) as store:
        gateway = store.gateway_for(Note)
        gateway.add_insert(Note(_id="kept", text="persisted"))
        gateway.execute_inserts()

    with SQLiteStore(url) as store:
        assert store.gateway_for(Note).load_by_identity({"_id": "kept"})["text"] == "persisted"

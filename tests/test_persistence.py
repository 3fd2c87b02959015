import sqlite3

import pytest

from restopos.errors import PersistenceFailure
from restopos.persistence import KeyValueStore, iter_records


def test_get_missing_key_returns_default(store):
    assert store.get("orders") is None
    assert store.get("orders", []) == []


def test_set_and_get_round_trip(store):
    store.set("products", [{"id": "1", "name": "Café", "stock": 3}])
    assert store.get("products") == [{"id": "1", "name": "Café", "stock": 3}]


def test_set_overwrites_existing_value(store):
    store.set("userSession", {"username": "admin"})
    store.set("userSession", {"username": "cajero"})
    assert store.get("userSession") == {"username": "cajero"}
    assert store.keys() == ["userSession"]


def test_data_survives_new_store_instance(tmp_path):
    path = tmp_path / "nested" / "pos.db"
    KeyValueStore(path).set_many({"orders": [], "products": [{"id": "1"}]})
    reopened = KeyValueStore(path)
    assert reopened.keys() == ["orders", "products"]
    assert reopened.get("products") == [{"id": "1"}]


def test_delete(store):
    store.set("userSession", {"username": "admin"})
    store.delete("userSession")
    store.delete("userSession")
    assert store.get("userSession") is None


def test_unserialisable_batch_writes_nothing(store):
    with pytest.raises(PersistenceFailure):
        store.set_many({"orders": [], "products": object()})
    assert store.keys() == []


def test_corrupt_record_raises_persistence_failure(store):
    with sqlite3.connect(store.db_path) as conn:
        conn.execute("INSERT INTO records (key, value) VALUES ('orders', '{not json')")
    conn.close()

    with pytest.raises(PersistenceFailure):
        store.get("orders")


def test_iter_records_skips_non_dict_rows(store):
    store.set("orders", [{"id": "1"}, "junk", 3, {"id": "2"}])
    assert [row["id"] for row in iter_records(store, "orders")] == ["1", "2"]


def test_iter_records_ignores_non_list_value(store):
    store.set("orders", {"id": "1"})
    assert list(iter_records(store, "orders")) == []

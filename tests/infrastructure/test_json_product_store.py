"""Tests for the JSON-file-backed store."""

import json
import threading

import pytest

from invtrack.infrastructure.persistence.json_product_store import (
    PUSH_CHARS,
    JsonProductStore,
    PushIdGenerator,
)

WIDGET = {"name": "Widget", "category": "", "stock": 3, "price": 2.5}


@pytest.fixture
def store(tmp_path):
    return JsonProductStore(tmp_path / "data" / "products.json")


class TestPushIdGenerator:

    def test_ids_are_twenty_push_chars(self):
        key = PushIdGenerator()()
        assert len(key) == 20
        assert all(c in PUSH_CHARS for c in key)

    def test_ids_sort_in_creation_order(self):
        generate = PushIdGenerator()
        keys = [generate() for _ in range(200)]
        assert keys == sorted(keys)
        assert len(set(keys)) == 200


class TestJsonProductStore:

    def test_creates_file(self, tmp_path):
        path = tmp_path / "nested" / "db.json"
        JsonProductStore(path)
        assert json.loads(path.read_text(encoding="utf-8")) == {}

    def test_create_writes_under_generated_key(self, store, tmp_path):
        key = store.create("products", WIDGET)
        on_disk = json.loads((tmp_path / "data" / "products.json").read_text(encoding="utf-8"))
        assert on_disk == {"products": {key: WIDGET}}

    def test_update_merges_fields(self, store):
        key = store.create("products", WIDGET)
        store.update(f"products/{key}", {"stock": 9})
        snapshots = []
        store.subscribe("products", snapshots.append)
        assert snapshots[-1][key] == {**WIDGET, "stock": 9}

    def test_remove_is_idempotent(self, store):
        key = store.create("products", WIDGET)
        store.remove(f"products/{key}")
        store.remove(f"products/{key}")
        store.remove("products/never-existed")
        snapshots = []
        store.subscribe("products", snapshots.append)
        assert snapshots == [None]

    def test_subscriber_gets_current_then_every_change(self, store):
        snapshots = []
        store.subscribe("products", snapshots.append)
        key = store.create("products", WIDGET)
        store.update(f"products/{key}", {"price": 3})
        store.remove(f"products/{key}")
        assert snapshots[0] is None
        assert snapshots[1] == {key: WIDGET}
        assert snapshots[2] == {key: {**WIDGET, "price": 3}}
        assert snapshots[3] is None

    def test_unsubscribe_stops_notifications(self, store):
        snapshots = []
        unsubscribe = store.subscribe("products", snapshots.append)
        unsubscribe()
        unsubscribe()
        store.create("products", WIDGET)
        assert snapshots == [None]

    def test_subscriber_only_sees_its_collection(self, store):
        snapshots = []
        store.subscribe("products", snapshots.append)
        store.create("suppliers", {"name": "ACME"})
        assert snapshots == [None, None]

    def test_snapshot_is_a_copy(self, store):
        key = store.create("products", WIDGET)
        snapshots = []
        store.subscribe("products", snapshots.append)
        snapshots[0][key]["stock"] = 999
        again = []
        store.subscribe("products", again.append)
        assert again[0][key]["stock"] == 3

    def test_concurrent_creates_get_distinct_keys(self, store):
        keys: list[str] = []
        barrier = threading.Barrier(8)

        def create_many():
            barrier.wait()
            for _ in range(10):
                keys.append(store.create("products", WIDGET))

        workers = [threading.Thread(target=create_many) for _ in range(8)]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

        snapshots = []
        store.subscribe("products", snapshots.append)
        assert len(set(keys)) == 80
        assert len(snapshots[-1]) == 80

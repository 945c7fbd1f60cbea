"""JSON-file-backed implementation of ProductStore.

Keeps the whole database as one JSON tree on disk, addressed by the same
slash-separated paths as the hosted store. Subscribers living in this
process are notified synchronously after each write; writes made by other
processes are not observed.
"""

from __future__ import annotations

import copy
import json
import logging
import secrets
import threading
import time
from pathlib import Path

from invtrack.domain.repository.product_store import (
    ProductStore,
    SnapshotCallback,
    Unsubscribe,
    child_path,
)

logger = logging.getLogger(__name__)

PUSH_CHARS = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"


class PushIdGenerator:
    """Generates 20-character keys that sort in creation order.

    The first 8 characters encode the timestamp in milliseconds, the last
    12 are random. Keys made within the same millisecond bump the random
    part by one so they still sort after each other.
    """

    def __init__(self) -> None:
        self._last_time = 0
        self._last_random: list[int] = []

    def __call__(self) -> str:
        now = int(time.time() * 1000)
        if now == self._last_time and self._last_random:
            i = 11
            while i >= 0 and self._last_random[i] == 63:
                self._last_random[i] = 0
                i -= 1
            if i >= 0:
                self._last_random[i] += 1
        else:
            self._last_random = [secrets.randbelow(64) for _ in range(12)]
        self._last_time = now

        time_chars = []
        for _ in range(8):
            time_chars.append(PUSH_CHARS[now % 64])
            now //= 64
        return "".join(reversed(time_chars)) + "".join(
            PUSH_CHARS[n] for n in self._last_random
        )


def _split(path: str) -> list[str]:
    return [part for part in path.split("/") if part]


class JsonProductStore(ProductStore):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.RLock()
        self._new_key = PushIdGenerator()
        self._subscribers: list[tuple[list[str], SnapshotCallback]] = []
        self._ensure_file()

    # --- ProductStore interface -----------------------------------------------

    def create(self, collection_path: str, record: dict) -> str:
        with self._lock:
            key = self._new_key()
            tree = self._load_raw()
            self._node(tree, _split(collection_path), create=True)[key] = copy.deepcopy(record)
            self._persist_raw(tree)
        logger.info("Created %s", child_path(collection_path, key))
        self._notify()
        return key

    def update(self, record_path: str, fields: dict) -> None:
        with self._lock:
            tree = self._load_raw()
            node = self._node(tree, _split(record_path), create=True)
            node.update(copy.deepcopy(fields))
            self._persist_raw(tree)
        logger.info("Updated %s", record_path)
        self._notify()

    def remove(self, record_path: str) -> None:
        parts = _split(record_path)
        with self._lock:
            tree = self._load_raw()
            parent = self._node(tree, parts[:-1])
            if parent is None or parts[-1] not in parent:
                logger.debug("Nothing to delete at %s", record_path)
                return
            del parent[parts[-1]]
            self._persist_raw(tree)
        logger.info("Deleted %s", record_path)
        self._notify()

    def subscribe(
        self, collection_path: str, on_change: SnapshotCallback
    ) -> Unsubscribe:
        entry = (_split(collection_path), on_change)
        with self._lock:
            self._subscribers.append(entry)
            snapshot = self._snapshot(self._load_raw(), entry[0])
        on_change(snapshot)

        def unsubscribe() -> None:
            with self._lock:
                if entry in self._subscribers:
                    self._subscribers.remove(entry)

        return unsubscribe

    # --- Tree helpers ---------------------------------------------------------

    @staticmethod
    def _node(tree: dict, parts: list[str], create: bool = False) -> dict | None:
        node = tree
        for part in parts:
            child = node.get(part)
            if not isinstance(child, dict):
                if not create:
                    return None
                child = node[part] = {}
            node = child
        return node

    def _snapshot(self, tree: dict, parts: list[str]) -> dict | None:
        node = self._node(tree, parts)
        return copy.deepcopy(node) if node else None

    def _notify(self) -> None:
        with self._lock:
            tree = self._load_raw()
            deliveries = [
                (callback, self._snapshot(tree, parts))
                for parts, callback in self._subscribers
            ]
        for callback, snapshot in deliveries:
            callback(snapshot)

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> dict:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, tree: dict) -> None:
        self._file_path.write_text(
            json.dumps(tree, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("{}", encoding="utf-8")

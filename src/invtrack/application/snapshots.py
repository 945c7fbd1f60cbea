"""Snapshot decoding and the snapshot stream.

The store pushes whole-collection snapshots through a callback, possibly
from a background thread. ``SnapshotStream`` turns that callback into a
plain iterator so consumers pull snapshots on their own thread, and so
tests can feed synthetic snapshots without any store at all.
"""

from __future__ import annotations

import logging
import queue
from dataclasses import dataclass
from typing import Iterator

from invtrack.domain.exceptions import ValidationError
from invtrack.domain.model.product import Product
from invtrack.domain.repository.product_store import ProductStore, Snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnreadableRecord:
    """A child of the collection that is not a valid product.

    Kept so the entry still shows up (and can be deleted) instead of
    silently disappearing from the table.
    """

    id: str
    name: str
    reason: str


@dataclass(frozen=True)
class DecodedSnapshot:
    products: list[Product]
    unreadable: list[UnreadableRecord]


def decode_snapshot(snapshot: Snapshot) -> DecodedSnapshot:
    """Decode a collection snapshot, in key order.

    Entries that are not valid records (written by some other client)
    are set aside as UnreadableRecord rather than failing the snapshot.
    """
    products: list[Product] = []
    unreadable: list[UnreadableRecord] = []
    for key, raw in (snapshot or {}).items():
        try:
            products.append(Product.from_fields(key, raw))
        except ValidationError as exc:
            logger.warning("Unreadable record %s: %s", key, exc)
            name = raw.get("name") if isinstance(raw, dict) else None
            unreadable.append(
                UnreadableRecord(id=key, name=str(name or ""), reason=str(exc))
            )
    return DecodedSnapshot(products=products, unreadable=unreadable)


class SnapshotStream:
    """Lazy, endless, single-use sequence of collection snapshots.

    The subscription is opened on construction and closed by ``close()``
    (or by leaving the ``with`` block). Iteration blocks until the next
    snapshot arrives and stops once the stream is closed. A closed stream
    cannot be reopened.
    """

    _CLOSED = object()

    def __init__(self, store: ProductStore, collection_path: str) -> None:
        self._queue: queue.Queue = queue.Queue()
        self._closed = False
        self._iterating = False
        self._unsubscribe = store.subscribe(collection_path, self._queue.put)

    def __enter__(self) -> SnapshotStream:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    def __iter__(self) -> Iterator[Snapshot]:
        if self._iterating:
            raise RuntimeError("SnapshotStream can only be iterated once")
        self._iterating = True
        return self._generate()

    def _generate(self) -> Iterator[Snapshot]:
        while True:
            item = self._queue.get()
            if item is self._CLOSED:
                return
            yield item

    def next(self, timeout: float | None = None) -> Snapshot:
        """Block for the next snapshot.

        Raises TimeoutError if nothing arrives in time, and EOFError once
        the stream is closed.
        """
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            raise TimeoutError("No snapshot received from the store") from None
        if item is self._CLOSED:
            self._queue.put(self._CLOSED)
            raise EOFError("SnapshotStream is closed")
        return item

    def drain(self) -> list[Snapshot]:
        """Return every snapshot already received, without blocking."""
        pending: list[Snapshot] = []
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return pending
            if item is self._CLOSED:
                self._queue.put(self._CLOSED)
                return pending
            pending.append(item)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._unsubscribe()
        # Snapshots not yet consumed are dropped; nothing is delivered after close.
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                break
        self._queue.put(self._CLOSED)

"""Abstract client for the hierarchical document store.

Records are addressed by slash-separated paths: a collection lives at
``products`` and each record at ``products/<id>``. Defined in the domain
layer so the domain never depends on a vendor SDK. Concrete
implementations live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

# Full collection contents keyed by record id; None when the collection is empty.
Snapshot = dict[str, dict] | None
SnapshotCallback = Callable[[Snapshot], None]
Unsubscribe = Callable[[], None]


def child_path(collection_path: str, key: str) -> str:
    return f"{collection_path.rstrip('/')}/{key}"


class ProductStore(ABC):

    @abstractmethod
    def create(self, collection_path: str, record: dict) -> str:
        """Write ``record`` under a freshly generated key and return the key."""

    @abstractmethod
    def update(self, record_path: str, fields: dict) -> None:
        """Merge ``fields`` into the record at ``record_path``."""

    @abstractmethod
    def remove(self, record_path: str) -> None:
        """Delete the record at ``record_path``. Missing records are ignored."""

    @abstractmethod
    def subscribe(
        self, collection_path: str, on_change: SnapshotCallback
    ) -> Unsubscribe:
        """Call ``on_change`` with the whole collection after every change.

        The current contents are delivered once right after subscribing.
        Calling the returned function stops further notifications.
        """

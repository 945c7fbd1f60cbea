"""Firebase Realtime Database implementation of ProductStore."""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable

import firebase_admin
from firebase_admin import credentials, db

from invtrack.domain.repository.product_store import (
    ProductStore,
    Snapshot,
    SnapshotCallback,
    Unsubscribe,
)
from invtrack.infrastructure.configuration import FirebaseConfig

logger = logging.getLogger(__name__)

APP_NAME = "invtrack"


def _split(path: str) -> list[str]:
    return [part for part in path.split("/") if part]


def _set_at(tree: Any, parts: list[str], value: Any) -> Any:
    """Return ``tree`` with ``value`` stored at ``parts``.

    None deletes, and objects left empty collapse to None, the same way the
    database treats them.
    """
    if not parts:
        return copy.deepcopy(value) if value not in ({}, None) else None
    node = dict(tree) if isinstance(tree, dict) else {}
    head, rest = parts[0], parts[1:]
    child = _set_at(node.get(head), rest, value)
    if child is None:
        node.pop(head, None)
    else:
        node[head] = child
    return node or None


def apply_event(tree: Any, event_type: str, path: str, data: Any) -> Any:
    """Fold one streaming event into the locally held collection tree.

    ``put`` replaces whatever lives at ``path``; ``patch`` merges each
    child of ``data`` under ``path``.
    """
    parts = _split(path)
    if event_type == "put":
        return _set_at(tree, parts, data)
    if event_type == "patch":
        for key, value in (data or {}).items():
            tree = _set_at(tree, parts + _split(key), value)
        return tree
    logger.debug("Ignoring %s event at %s", event_type, path)
    return tree


def initialize_app(config: FirebaseConfig) -> firebase_admin.App:
    """Return the process-wide Firebase app, creating it on first use."""
    try:
        return firebase_admin.get_app(APP_NAME)
    except ValueError:
        pass
    if config.credentials_path:
        credential = credentials.Certificate(config.credentials_path)
    else:
        credential = credentials.ApplicationDefault()
    options = {"databaseURL": config.database_url}
    if config.project_id:
        options["projectId"] = config.project_id
    logger.info("Connecting to %s", config.database_url)
    return firebase_admin.initialize_app(credential, options, name=APP_NAME)


class FirebaseProductStore(ProductStore):

    def __init__(self, reference: Callable[[str], db.Reference]) -> None:
        self._reference = reference

    @classmethod
    def from_config(cls, config: FirebaseConfig) -> FirebaseProductStore:
        app = initialize_app(config)
        return cls(lambda path: db.reference(path, app=app))

    # --- ProductStore interface -----------------------------------------------

    def create(self, collection_path: str, record: dict) -> str:
        new_ref = self._reference(collection_path).push(record)
        logger.info("Pushed %s/%s", collection_path, new_ref.key)
        return new_ref.key

    def update(self, record_path: str, fields: dict) -> None:
        self._reference(record_path).update(fields)
        logger.info("Updated %s", record_path)

    def remove(self, record_path: str) -> None:
        self._reference(record_path).delete()
        logger.info("Deleted %s", record_path)

    def subscribe(
        self, collection_path: str, on_change: SnapshotCallback
    ) -> Unsubscribe:
        state: dict[str, Snapshot] = {"tree": None}

        def _on_event(event: db.Event) -> None:
            state["tree"] = apply_event(
                state["tree"], event.event_type, event.path, event.data
            )
            on_change(copy.deepcopy(state["tree"]))

        registration = self._reference(collection_path).listen(_on_event)
        logger.debug("Listening on %s", collection_path)
        closed = False

        def unsubscribe() -> None:
            nonlocal closed
            if closed:
                return
            closed = True
            registration.close()

        return unsubscribe

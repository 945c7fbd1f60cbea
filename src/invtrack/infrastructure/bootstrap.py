"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions. The store client is
built once per process and handed to whoever needs it through a
StoreContext.
"""

from __future__ import annotations

from dataclasses import dataclass

from invtrack.application.inventory_view import InventoryViewController
from invtrack.application.prompter import Prompter
from invtrack.domain.repository.product_store import ProductStore
from invtrack.infrastructure.configuration import AppConfig, ConfigurationError
from invtrack.infrastructure.persistence.firebase_product_store import (
    FirebaseProductStore,
)
from invtrack.infrastructure.persistence.json_product_store import JsonProductStore


@dataclass(frozen=True)
class StoreContext:
    store: ProductStore
    collection_path: str = "products"

    def view(self, prompter: Prompter) -> InventoryViewController:
        return InventoryViewController(
            store=self.store,
            prompter=prompter,
            collection_path=self.collection_path,
        )


def product_store(config: AppConfig) -> ProductStore:
    if config.store.backend == "json":
        return JsonProductStore(config.store.data_file)
    if config.firebase is None:
        raise ConfigurationError("Firebase backend selected but not configured")
    return FirebaseProductStore.from_config(config.firebase)


def build_context(config: AppConfig) -> StoreContext:
    return StoreContext(
        store=product_store(config),
        collection_path=config.store.collection_path,
    )

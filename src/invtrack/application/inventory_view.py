"""Application service: the inventory view controller.

Holds the two pieces of view state, the product list mirrored from the
store and the form draft, and turns the user's gestures into store calls.
The mirrored list is only ever replaced by a snapshot; user actions write
to the store and wait for the subscription to bring the change back.
"""

from __future__ import annotations

import logging
from typing import Iterator

from invtrack.application.dto import ProductRowDTO
from invtrack.application.prompter import Prompter
from invtrack.application.snapshots import (
    SnapshotStream,
    UnreadableRecord,
    decode_snapshot,
)
from invtrack.domain.exceptions import EntityNotFoundError, ValidationError
from invtrack.domain.model.draft import FormDraft
from invtrack.domain.model.product import Product
from invtrack.domain.repository.product_store import (
    ProductStore,
    Snapshot,
    child_path,
)

logger = logging.getLogger(__name__)

DELETE_PROMPT = "Are you sure you want to delete this product?"


class InventoryViewController:

    def __init__(
        self,
        store: ProductStore,
        prompter: Prompter,
        collection_path: str = "products",
    ) -> None:
        self._store = store
        self._prompter = prompter
        self._collection_path = collection_path
        self._products: list[Product] = []
        self._unreadable: list[UnreadableRecord] = []
        self._draft = FormDraft.empty()
        self._stream: SnapshotStream | None = None

    # --- State ----------------------------------------------------------------

    @property
    def products(self) -> list[Product]:
        return list(self._products)

    @property
    def unreadable(self) -> list[UnreadableRecord]:
        """Collection entries that could not be decoded as products."""
        return list(self._unreadable)

    @property
    def draft(self) -> FormDraft:
        return self._draft

    @property
    def mounted(self) -> bool:
        return self._stream is not None and not self._stream.closed

    def get_product(self, product_id: str) -> Product:
        for product in self._products:
            if product.id == product_id:
                return product
        raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

    def rows(self) -> list[ProductRowDTO]:
        return [
            ProductRowDTO(
                id=p.id or "",
                name=p.name,
                category=p.category,
                stock=p.stock.value,
                price=str(p.price),
                low_stock=p.is_low_stock,
            )
            for p in self._products
        ] + [
            ProductRowDTO(
                id=r.id,
                name=r.name,
                category="",
                stock=None,
                price="",
                low_stock=False,
                unreadable=True,
            )
            for r in self._unreadable
        ]

    # --- Subscription ---------------------------------------------------------

    def mount(self) -> None:
        """Start mirroring the collection.

        Snapshots are queued as they arrive and applied by ``sync()`` on
        the caller's thread.
        """
        if self._stream is not None:
            raise RuntimeError("View is already mounted")
        self._stream = SnapshotStream(self._store, self._collection_path)
        logger.debug("Subscribed to %s", self._collection_path)

    def unmount(self) -> None:
        if self._stream is None:
            return
        self._stream.close()
        self._stream = None
        logger.debug("Unsubscribed from %s", self._collection_path)

    def sync(self) -> bool:
        """Apply every snapshot received since the last call.

        Returns True if the mirrored list was replaced.
        """
        if self._stream is None:
            raise RuntimeError("View is not mounted")
        pending = self._stream.drain()
        if not pending:
            return False
        self.apply_snapshot(pending[-1])
        return True

    def wait_for_sync(self, timeout: float | None = None) -> None:
        """Block until at least one snapshot has been applied."""
        if self._stream is None:
            raise RuntimeError("View is not mounted")
        self.apply_snapshot(self._stream.next(timeout=timeout))
        self.sync()

    def follow(self) -> Iterator[list[ProductRowDTO]]:
        """Apply snapshots as they arrive, yielding the table after each.

        Runs until the view is unmounted.
        """
        if self._stream is None:
            raise RuntimeError("View is not mounted")
        for snapshot in self._stream:
            self.apply_snapshot(snapshot)
            yield self.rows()

    def apply_snapshot(self, snapshot: Snapshot) -> None:
        """Replace the mirrored list with the contents of ``snapshot``."""
        decoded = decode_snapshot(snapshot)
        self._products = decoded.products
        self._unreadable = decoded.unreadable
        logger.debug(
            "Applied snapshot with %d products, %d unreadable",
            len(self._products),
            len(self._unreadable),
        )

    # --- Form -----------------------------------------------------------------

    def set_field(self, field: str, value: str) -> None:
        self._draft = self._draft.with_field(field, value)

    def submit(self) -> bool:
        """The form button: save when editing, add otherwise."""
        if self._draft.is_editing:
            return self.save_edit()
        return self.submit_new() is not None

    def submit_new(self) -> str | None:
        """Create a product from the draft.

        Returns the new id, or None if the draft was rejected. The draft
        is cleared right away; the table catches up through the
        subscription.
        """
        if self._draft.is_editing:
            return None
        product = self._validated_draft()
        if product is None:
            return None
        new_id = self._store.create(self._collection_path, product.to_fields())
        logger.info("Created product %s (%s)", new_id, product.name)
        self._draft = FormDraft.empty()
        return new_id

    def request_edit(self, product: Product) -> None:
        """Load ``product`` into the form, discarding any unsaved input."""
        self._draft = FormDraft.for_product(product)

    def save_edit(self) -> bool:
        if not self._draft.is_editing:
            return False
        product = self._validated_draft()
        if product is None:
            return False
        product_id = self._draft.editing_id
        self._store.update(
            child_path(self._collection_path, product_id), product.to_fields()
        )
        logger.info("Updated product %s", product_id)
        self._draft = FormDraft.empty()
        return True

    def cancel_edit(self) -> None:
        self._draft = FormDraft.empty()

    def request_delete(self, product_id: str) -> bool:
        """Delete a product after the user confirms. Returns True if deleted."""
        if not self._prompter.confirm(DELETE_PROMPT):
            return False
        self._store.remove(child_path(self._collection_path, product_id))
        logger.info("Removed product %s", product_id)
        return True

    # --- Internal helpers -----------------------------------------------------

    def _validated_draft(self) -> Product | None:
        try:
            return self._draft.to_product()
        except ValidationError as exc:
            self._prompter.warn(str(exc))
            return None

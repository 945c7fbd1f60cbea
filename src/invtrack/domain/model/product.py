"""Product record.

A product is a single inventory entry persisted in the document store.
Its ``id`` is handed out by the store on first write and never changes
afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass

from invtrack.domain.exceptions import ValidationError
from invtrack.domain.model.value_objects import Money, StockLevel

# Rows below this stock count are flagged in the table.
LOW_STOCK_THRESHOLD = 10


@dataclass(frozen=True)
class Product:
    """An inventory entry as mirrored from the store.

    Frozen: the mirrored list is rebuilt from every snapshot, so nothing
    ever mutates a product in place.
    """

    name: str
    stock: StockLevel
    price: Money
    category: str = ""
    id: str | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValidationError("Product name is required")

    @property
    def is_low_stock(self) -> bool:
        return self.stock.value < LOW_STOCK_THRESHOLD

    def to_fields(self) -> dict:
        """The four stored fields, as written under ``<collection>/<id>``."""
        return {
            "name": self.name,
            "category": self.category,
            "stock": self.stock.value,
            "price": self.price.to_number(),
        }

    @staticmethod
    def from_fields(product_id: str, raw: dict) -> Product:
        """Decode one child of a collection snapshot.

        Raises ValidationError when the stored value is not a usable record.
        """
        if not isinstance(raw, dict):
            raise ValidationError(f"Record {product_id!r} is not an object")
        for key in ("name", "stock", "price"):
            if raw.get(key) is None:
                raise ValidationError(f"Record {product_id!r} has no {key}")
        return Product(
            id=product_id,
            name=str(raw["name"]),
            category=str(raw.get("category") or ""),
            stock=StockLevel.of(raw["stock"]),
            price=Money.of(raw["price"]),
        )

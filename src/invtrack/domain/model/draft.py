"""The form draft: transient, unsaved state of the product form.

Values are kept exactly as typed; numbers are parsed only when the draft
is submitted.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from invtrack.domain.exceptions import ValidationError
from invtrack.domain.model.product import Product
from invtrack.domain.model.value_objects import Money, StockLevel

FORM_FIELDS = ("name", "category", "stock", "price")
REQUIRED_FIELDS = ("name", "stock", "price")


@dataclass(frozen=True)
class FormDraft:
    name: str = ""
    category: str = ""
    stock: str = ""
    price: str = ""
    editing_id: str | None = None

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    @staticmethod
    def empty() -> FormDraft:
        return FormDraft()

    @staticmethod
    def for_product(product: Product) -> FormDraft:
        """Populate the form from an existing product for editing."""
        return FormDraft(
            name=product.name,
            category=product.category,
            stock=str(product.stock),
            price=product.price.to_input(),
            editing_id=product.id,
        )

    def with_field(self, field: str, value: str) -> FormDraft:
        if field not in FORM_FIELDS:
            raise ValidationError(f"Unknown form field: {field!r}")
        return replace(self, **{field: value})

    def missing_fields(self) -> list[str]:
        return [f for f in REQUIRED_FIELDS if not getattr(self, f).strip()]

    def to_product(self) -> Product:
        """Validate the draft and parse it into a Product.

        Raises ValidationError naming the first problem found.
        """
        missing = self.missing_fields()
        if missing:
            raise ValidationError(
                "Please fill all required fields: " + ", ".join(missing)
            )
        return Product(
            id=self.editing_id,
            name=self.name.strip(),
            category=self.category.strip(),
            stock=StockLevel.of(self.stock),
            price=Money.from_input(self.price),
        )

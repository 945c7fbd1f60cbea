"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from invtrack.domain.exceptions import ValidationError

# Largest price accepted; keeps amounts exact as JSON numbers in every client.
MAX_PRICE = Decimal("1000000000000")
PRICE_PLACES = 2
# Largest integer a JavaScript client can hold exactly.
MAX_STOCK = 2**53 - 1


@dataclass(frozen=True)
class Money:
    """Non-negative price amount.

    Uses Decimal so a price typed as "9.99" is shown back as "9.99"
    instead of whatever binary float the store happens to return.
    """

    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Money amount must be finite, got {self.amount}")
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )
        if self.amount > MAX_PRICE:
            raise ValidationError(f"Money amount cannot exceed {MAX_PRICE}")

    # --- Conversion -----------------------------------------------------------

    def to_number(self) -> int | float:
        """Plain JSON number for the document store."""
        if self.amount == self.amount.to_integral_value():
            return int(self.amount)
        return float(self.amount)

    def to_input(self) -> str:
        """The amount as a user would type it back into the form."""
        return format(self.amount.normalize(), "f")

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        if isinstance(amount, bool):
            raise ValidationError(f"Invalid money amount: {amount!r}")
        try:
            return Money(Decimal(str(amount).strip()))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def from_input(raw: str) -> Money:
        """Parse a price typed into the form.

        Stricter than ``of``: at most two decimal places, so what is
        stored is exactly what was typed.
        """
        money = Money.of(raw)
        exponent = money.amount.normalize().as_tuple().exponent
        if exponent < -PRICE_PLACES:
            raise ValidationError(
                f"Price can have at most {PRICE_PLACES} decimal places, got {raw!r}"
            )
        return money


@dataclass(frozen=True)
class StockLevel:
    """A non-negative whole number of units on hand."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Stock must be an integer, got {type(self.value).__name__}"
            )
        if self.value < 0:
            raise ValidationError("Stock cannot be negative")
        if self.value > MAX_STOCK:
            raise ValidationError(f"Stock cannot exceed {MAX_STOCK}")

    def __str__(self) -> str:
        return str(self.value)

    @staticmethod
    def of(raw: str | int | float) -> StockLevel:
        """Parse user or store input into a StockLevel.

        Whole-valued floats (``5.0``) are accepted because JSON numbers
        coming back from the store are not typed.
        """
        if isinstance(raw, bool):
            raise ValidationError(f"Invalid stock value: {raw!r}")
        if isinstance(raw, int):
            return StockLevel(raw)
        if isinstance(raw, float):
            if not raw.is_integer():
                raise ValidationError(f"Stock must be a whole number, got {raw!r}")
            return StockLevel(int(raw))
        try:
            return StockLevel(int(str(raw).strip()))
        except ValueError as exc:
            raise ValidationError(f"Stock must be a whole number, got {raw!r}") from exc

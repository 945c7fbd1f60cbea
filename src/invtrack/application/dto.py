"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProductRowDTO:
    """Output: one row of the inventory table."""

    id: str
    name: str
    category: str
    stock: int | None  # None for unreadable entries
    price: str  # formatted, e.g. "$2.50"
    low_stock: bool
    unreadable: bool = False

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""StockRecord model for the stock-report ingestion engine.

A StockRecord is the normalized output unit: one per accepted raw row.
"""

__all__ = [
    "StockRecord",
]


@dataclass(frozen=True)
class StockRecord:
    """Normalized stock row after transformation and validation.

    sku is always stripped and upper-cased so downstream lookups do not depend
    on the exporting platform's casing. current_stock is an integer >= 0.
    """
    sku: str  # non-empty, upper-case
    current_stock: int  # floored integer, never negative
    name: str | None = None
    price: float | None = None
    category: str | None = None

    @staticmethod
    def from_fields(values: dict[str, Any]) -> StockRecord:
        """Build a record from the field -> transformed value mapping of a row."""
        return StockRecord(
            sku=values["sku"],
            current_stock=values["currentStock"],
            name=values.get("name"),
            price=values.get("price"),
            category=values.get("category"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys, omitting optional fields that are unset."""
        out: dict[str, Any] = {"sku": self.sku, "currentStock": self.current_stock}
        if self.name is not None:
            out["name"] = self.name
        if self.price is not None:
            out["price"] = self.price
        if self.category is not None:
            out["category"] = self.category
        return out

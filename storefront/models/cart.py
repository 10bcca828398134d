"""
Cart records and derived line items.

A CartRecord is the server-held fact that the visitor has some quantity of
a product. A LineItem is the join of a CartRecord with its CatalogEntry.
"""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from storefront.models.catalog import CatalogEntry


class CartRecord(BaseModel):
    """
    Server-authoritative (productId, qty) pair.

    Example payload from backend:
        {"productId": "KCRwjF7lN97HnEaY", "qty": 3}
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    product_id: str = Field(..., alias="productId")
    quantity: int = Field(..., alias="qty", ge=0)


_cart_adapter = TypeAdapter(list[CartRecord])


def parse_cart(payload: Any) -> list[CartRecord]:
    """
    Validate a cart payload from GET /cart or POST /cart.

    Raises:
        pydantic.ValidationError: If the payload is not a list of cart records
    """
    return _cart_adapter.validate_python(payload)


@dataclass(frozen=True, slots=True)
class LineItem:
    """
    A display-ready cart row.

    Attributes:
        product_id: Product the row refers to
        quantity: Quantity from the cart record, never from the catalog
        name: Product name, None when unresolved
        category: Product category, None when unresolved
        unit_cost: Price per unit, None when unresolved
        rating: Rating out of five, None when unresolved
        image_url: Product image URL, None when unresolved
        resolved: False when the record had no matching catalog entry
    """

    product_id: str
    quantity: int
    name: str | None = None
    category: str | None = None
    unit_cost: float | None = None
    rating: int | None = None
    image_url: str | None = None
    resolved: bool = False

    @classmethod
    def from_record(cls, record: CartRecord, entry: CatalogEntry | None) -> "LineItem":
        """Join a cart record with its catalog entry, or build a partial item."""
        if entry is None:
            return cls(product_id=record.product_id, quantity=record.quantity)

        return cls(
            product_id=record.product_id,
            quantity=record.quantity,
            name=entry.name,
            category=entry.category,
            unit_cost=entry.unit_cost,
            rating=entry.rating,
            image_url=entry.image_url,
            resolved=True,
        )

    @property
    def subtotal(self) -> float:
        """quantity * unit_cost, or 0 for unresolved items."""
        if self.unit_cost is None:
            return 0.0
        return self.quantity * self.unit_cost

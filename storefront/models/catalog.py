"""
Catalog entries as returned by the products endpoints.

Example payload from backend:
    {
        "name": "iPhone XR",
        "category": "Phones",
        "cost": 100,
        "rating": 4,
        "image": "https://i.imgur.com/lulqWzW.jpg",
        "_id": "v4sLtEcMpzabRyfx"
    }
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class CatalogEntry(BaseModel):
    """A product's shared, display-relevant attributes."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: str
    category: str
    unit_cost: float = Field(..., alias="cost", ge=0)
    rating: int = Field(..., ge=0, le=5)
    image_url: str = Field(..., alias="image")


_catalog_adapter = TypeAdapter(list[CatalogEntry])


def parse_catalog(payload: Any) -> list[CatalogEntry]:
    """
    Validate a products payload.

    Args:
        payload: Decoded JSON body from GET /products or /products/search

    Returns:
        List of CatalogEntry in backend order

    Raises:
        pydantic.ValidationError: If the payload is not a list of products
    """
    return _catalog_adapter.validate_python(payload)

from unittest.mock import AsyncMock

import pytest

from storefront.clients.backend import reset_storefront_client
from storefront.models.cart import CartRecord
from storefront.models.catalog import CatalogEntry

BASE_URL = "https://test-storefront.example.com/api/v1"


@pytest.fixture(autouse=True)
def reset_default_client():
    """Drop the shared client between tests so settings overrides take effect."""
    reset_storefront_client()
    yield
    reset_storefront_client()


def make_entry(
    product_id: str,
    unit_cost: float = 100,
    name: str | None = None,
    category: str = "Electronics",
    rating: int = 4,
) -> CatalogEntry:
    return CatalogEntry(
        id=product_id,
        name=name or f"Product {product_id}",
        category=category,
        unit_cost=unit_cost,
        rating=rating,
        image_url=f"https://i.example.com/{product_id}.jpg",
    )


def make_record(product_id: str, quantity: int = 1) -> CartRecord:
    return CartRecord(product_id=product_id, quantity=quantity)


@pytest.fixture
def sample_catalog() -> list[CatalogEntry]:
    return [
        make_entry("A", unit_cost=100, name="iPhone XR", category="Phones", rating=4),
        make_entry("B", unit_cost=50, name="Basketball", category="Sports", rating=5),
    ]


@pytest.fixture
def sample_products_payload() -> list[dict]:
    """Products payload as the backend returns it."""
    return [
        {
            "name": "iPhone XR",
            "category": "Phones",
            "cost": 100,
            "rating": 4,
            "image": "https://i.imgur.com/lulqWzW.jpg",
            "_id": "v4sLtEcMpzabRyfx",
        },
        {
            "name": "Basketball",
            "category": "Sports",
            "cost": 100,
            "rating": 5,
            "image": "https://i.imgur.com/lulqWzW.jpg",
            "_id": "upLK9JbQ4rMhTwt4",
        },
    ]


@pytest.fixture
def mock_backend(sample_catalog: list[CatalogEntry]) -> AsyncMock:
    """Backend double with a loaded catalog and an empty cart."""
    backend = AsyncMock()
    backend.fetch_catalog.return_value = sample_catalog
    backend.search_catalog.return_value = sample_catalog[:1]
    backend.fetch_cart.return_value = []
    backend.upsert_cart_item.return_value = []
    return backend

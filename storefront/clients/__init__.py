from storefront.clients.backend import (
    StorefrontClient,
    get_storefront_client,
    reset_storefront_client,
)

__all__ = [
    "StorefrontClient",
    "get_storefront_client",
    "reset_storefront_client",
]

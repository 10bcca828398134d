from storefront.models.cart import CartRecord, LineItem, parse_cart
from storefront.models.catalog import CatalogEntry, parse_catalog
from storefront.models.failure import (
    AuthRequiredError,
    BackendRejectedError,
    CatalogNotFoundError,
    DuplicateCartItemError,
    FailureKind,
    InvalidQuantityError,
    KnownError,
    ProductNotFoundError,
    RefusalError,
    TransientFaultError,
)
from storefront.models.notice import Notice, NoticeSeverity, notice_from_error

__all__ = [
    "AuthRequiredError",
    "BackendRejectedError",
    "CartRecord",
    "CatalogEntry",
    "CatalogNotFoundError",
    "DuplicateCartItemError",
    "FailureKind",
    "InvalidQuantityError",
    "KnownError",
    "LineItem",
    "Notice",
    "NoticeSeverity",
    "ProductNotFoundError",
    "RefusalError",
    "TransientFaultError",
    "notice_from_error",
    "parse_cart",
    "parse_catalog",
]

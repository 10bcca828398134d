"""
Storefront services.

Cart reconciliation, totals, debounced search and the synchronizer that
ties them to the backend.
"""

from storefront.services.cart_merger import index_catalog, is_item_in_cart, merge
from storefront.services.cart_synchronizer import CartSynchronizer, StorefrontBackend
from storefront.services.scheduler import (
    AsyncioScheduler,
    ManualScheduler,
    Scheduler,
    TimerHandle,
)
from storefront.services.search_debouncer import DebounceState, SearchDebouncer
from storefront.services.totals import format_cart_summary, total_quantity, total_value

__all__ = [
    # Cart merger
    "index_catalog",
    "is_item_in_cart",
    "merge",
    # Totals
    "format_cart_summary",
    "total_quantity",
    "total_value",
    # Debounced search
    "AsyncioScheduler",
    "DebounceState",
    "ManualScheduler",
    "Scheduler",
    "SearchDebouncer",
    "TimerHandle",
    # Synchronizer
    "CartSynchronizer",
    "StorefrontBackend",
]

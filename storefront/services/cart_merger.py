"""
Cart merger.

Joins the server's sparse cart records against the cached catalog to
produce display-ready line items.

Policy for orphaned records (no catalog entry with that id): a partial
LineItem with resolved=False and no catalog fields is emitted in place.
It keeps its quantity and contributes 0 to the cart value.
"""

import logging
from collections.abc import Iterable, Sequence

from storefront.models.cart import CartRecord, LineItem
from storefront.models.catalog import CatalogEntry

logger = logging.getLogger(__name__)


def index_catalog(catalog: Iterable[CatalogEntry]) -> dict[str, CatalogEntry]:
    """
    Build an id -> entry mapping.

    The first entry wins if the backend repeats an id.
    """
    index: dict[str, CatalogEntry] = {}
    for entry in catalog:
        index.setdefault(entry.id, entry)
    return index


def merge(records: Sequence[CartRecord], catalog: Sequence[CatalogEntry]) -> list[LineItem]:
    """
    Return the complete data on all products in the cart.

    Args:
        records: Cart records in server order
        catalog: Full catalog (or current search result)

    Returns:
        One LineItem per distinct product_id, in record order. Unmatched
        records become partial items.
    """
    index = index_catalog(catalog)
    items: list[LineItem] = []
    seen: set[str] = set()
    orphaned = 0

    for record in records:
        if record.product_id in seen:
            logger.warning("Dropping repeated cart record for %s", record.product_id)
            continue
        seen.add(record.product_id)

        entry = index.get(record.product_id)
        if entry is None:
            orphaned += 1
        items.append(LineItem.from_record(record, entry))

    if orphaned:
        logger.debug("%d of %d cart records have no catalog entry", orphaned, len(items))

    return items


def is_item_in_cart(records: Iterable[CartRecord], product_id: str) -> bool:
    """Whether a product of the given id exists in the cart records."""
    return any(record.product_id == product_id for record in records)

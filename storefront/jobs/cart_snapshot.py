"""
Print a reconciled snapshot of a visitor's cart.

Loads the catalog and the cart concurrently, optionally runs a debounced
search, then logs every notice and the cart summary. Useful for checking
a backend deployment without a browser.
"""

import argparse
import asyncio
import logging

from storefront.clients.backend import StorefrontClient
from storefront.models.notice import Notice
from storefront.services.cart_synchronizer import CartSynchronizer
from storefront.services.totals import format_cart_summary

logger = logging.getLogger(__name__)


def _log_notice(notice: Notice) -> None:
    logger.info("[%s] %s", notice.severity.value, notice.message)


async def run_snapshot(
    auth_token: str | None = None,
    search: str | None = None,
    base_url: str | None = None,
) -> CartSynchronizer:
    """
    Build a synchronizer, load everything and return it.

    Args:
        auth_token: Bearer token for the cart endpoints. Without one, no cart is loaded.
        search: Optional search text submitted through the debouncer
        base_url: Backend API base URL. Defaults to settings.backend_url.

    Returns:
        The synchronizer with catalog and cart loaded
    """
    synchronizer = CartSynchronizer(StorefrontClient(base_url=base_url), on_notice=_log_notice)

    await asyncio.gather(synchronizer.load_catalog(), synchronizer.load_cart(auth_token))

    if search is not None:
        synchronizer.submit_search(search)
        await synchronizer.wait_for_debounce()
        await synchronizer.wait_for_searches()
        logger.info("Catalog now holds %d products", len(synchronizer.catalog))

    logger.info("Cart snapshot:\n%s", format_cart_summary(synchronizer.reconciled_cart))
    return synchronizer


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Show a reconciled storefront cart")
    parser.add_argument("--token", help="Bearer token returned on login")
    parser.add_argument("--search", help="Search text to run after loading")
    parser.add_argument("--base-url", help="Backend API base URL")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(run_snapshot(auth_token=args.token, search=args.search, base_url=args.base_url))


if __name__ == "__main__":
    main()

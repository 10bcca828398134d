"""
Cart synchronizer.

Owns the single source of truth for what the display layer shows:

- catalog: the last catalog or search result, replaced wholesale
- cart_records: the last cart the backend returned, replaced wholesale
- reconciled_cart: merge(cart_records, catalog), recomputed from scratch

INVARIANTS:
- cart_records is only ever replaced by a backend response, never edited
  locally (no optimistic updates, no local removal on quantity 0)
- reconciled_cart is empty until the catalog has loaded at least once, so
  fetch ordering can never show a cart of all-partial items
- every terminal outcome of a network operation emits exactly one notice;
  local refusals emit a warning and make no network call
- a catalog response (load or search) is dropped only if a newer catalog
  request has already been applied; a newer request that fails does not
  supersede anything
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Protocol

from storefront.clients.backend import get_storefront_client
from storefront.models.cart import CartRecord, LineItem
from storefront.models.catalog import CatalogEntry
from storefront.models.failure import (
    AuthRequiredError,
    CatalogNotFoundError,
    DuplicateCartItemError,
    InvalidQuantityError,
    KnownError,
    RefusalError,
)
from storefront.models.notice import Notice, notice_from_error
from storefront.services import totals
from storefront.services.cart_merger import is_item_in_cart, merge
from storefront.services.scheduler import Scheduler
from storefront.services.search_debouncer import SearchDebouncer

logger = logging.getLogger(__name__)


class StorefrontBackend(Protocol):
    """The four backend operations the synchronizer depends on."""

    async def fetch_catalog(self) -> list[CatalogEntry]: ...

    async def search_catalog(self, query: str) -> list[CatalogEntry]: ...

    async def fetch_cart(self, auth_token: str | None) -> list[CartRecord]: ...

    async def upsert_cart_item(
        self, auth_token: str | None, product_id: str, quantity: int
    ) -> list[CartRecord]: ...


class CartSynchronizer:
    """
    Orchestrates catalog load, cart load, mutations and debounced search.

    All operations are coroutines meant to run on a single asyncio loop.
    Overlapping mutations are allowed; whichever response arrives last
    becomes the held cart.
    """

    def __init__(
        self,
        client: StorefrontBackend | None = None,
        *,
        on_change: Callable[[list[LineItem]], None] | None = None,
        on_notice: Callable[[Notice], None] | None = None,
        scheduler: Scheduler | None = None,
        debounce_window: float | None = None,
    ) -> None:
        """
        Initialize the synchronizer.

        Args:
            client: Backend operations. Defaults to the shared StorefrontClient.
            on_change: Called with the fresh reconciled cart after every recompute
            on_notice: Called with every notice as it is emitted
            scheduler: Timer source for the search debouncer
            debounce_window: Search quiet period in seconds. Defaults to settings.
        """
        self._client: StorefrontBackend = client or get_storefront_client()
        self._on_change = on_change
        self._on_notice = on_notice

        self._catalog: list[CatalogEntry] = []
        self._catalog_loaded = False
        self._cart_records: list[CartRecord] = []
        self._reconciled: list[LineItem] = []
        self._notices: list[Notice] = []
        self._loading = 0

        self._catalog_ticket = 0
        self._applied_ticket = 0
        self._search_tasks: set[asyncio.Task[Notice | None]] = set()
        self._debounce_settled = asyncio.Event()
        self._debounce_settled.set()
        self._debouncer = SearchDebouncer(
            self._on_search_due, window=debounce_window, scheduler=scheduler
        )

    # -------------------------------------------------------------------------
    # Held state
    # -------------------------------------------------------------------------

    @property
    def catalog(self) -> list[CatalogEntry]:
        return self._catalog

    @property
    def cart_records(self) -> list[CartRecord]:
        return self._cart_records

    @property
    def reconciled_cart(self) -> list[LineItem]:
        return self._reconciled

    @property
    def notices(self) -> list[Notice]:
        """Every notice emitted so far, oldest first."""
        return self._notices

    @property
    def catalog_loaded(self) -> bool:
        return self._catalog_loaded

    @property
    def is_loading(self) -> bool:
        """True while a full catalog fetch is in flight."""
        return self._loading > 0

    @property
    def debouncer(self) -> SearchDebouncer:
        return self._debouncer

    def total_quantity(self) -> int:
        return totals.total_quantity(self._reconciled)

    def total_value(self) -> float:
        return totals.total_value(self._reconciled)

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    async def load_catalog(self) -> Notice | None:
        """
        Fetch the full catalog and recompute the cart.

        Returns:
            The emitted notice, or None if a newer catalog response was already applied
        """
        ticket = self._next_catalog_ticket()
        self._loading += 1
        try:
            catalog = await self._client.fetch_catalog()
        except (KnownError, RefusalError) as e:
            if self._is_stale(ticket):
                logger.debug("Dropping superseded failed catalog load (ticket %d)", ticket)
                return None
            return self._fail("load catalog", e)
        finally:
            self._loading -= 1

        if self._is_stale(ticket):
            logger.debug("Dropping superseded catalog response (ticket %d)", ticket)
            return None

        self._apply_catalog(ticket, catalog)
        return self._emit(Notice.success(f"Loaded {len(catalog)} products"))

    def submit_search(self, text: str) -> None:
        """Feed a keystroke to the debouncer. The search runs once input settles."""
        self._debounce_settled.clear()
        self._debouncer.submit(text)

    def cancel_search(self) -> None:
        """Drop a pending debounced search. Requests already sent still complete."""
        self._debouncer.cancel()
        self._debounce_settled.set()

    async def search(self, query: str) -> Notice | None:
        """
        Search the catalog and replace it with the result.

        A not-found result empties the catalog and emits a warning. Any
        other failure leaves the catalog untouched.

        Returns:
            The emitted notice, or None if a newer catalog response was already applied
        """
        ticket = self._next_catalog_ticket()
        try:
            results = await self._client.search_catalog(query)
        except CatalogNotFoundError as e:
            if self._is_stale(ticket):
                logger.debug("Dropping superseded empty search for %r", query)
                return None
            self._apply_catalog(ticket, [])
            return self._emit(notice_from_error(e))
        except (KnownError, RefusalError) as e:
            if self._is_stale(ticket):
                logger.debug("Dropping superseded failed search for %r", query)
                return None
            return self._fail("search catalog", e)

        if self._is_stale(ticket):
            logger.debug("Dropping superseded search results for %r (ticket %d)", query, ticket)
            return None

        self._apply_catalog(ticket, results)
        return self._emit(Notice.success(f"Found {len(results)} products"))

    async def wait_for_debounce(self) -> None:
        """Wait until no debounced search is pending (fired or cancelled)."""
        await self._debounce_settled.wait()

    async def wait_for_searches(self) -> None:
        """Wait until every search started by the debouncer has finished."""
        while pending := [task for task in self._search_tasks if not task.done()]:
            await asyncio.gather(*pending)

    def _on_search_due(self, query: str) -> None:
        self._debounce_settled.set()
        task = asyncio.get_running_loop().create_task(self.search(query))
        self._search_tasks.add(task)
        task.add_done_callback(self._search_tasks.discard)

    # -------------------------------------------------------------------------
    # Cart
    # -------------------------------------------------------------------------

    async def load_cart(self, auth_token: str | None) -> Notice | None:
        """
        Fetch the visitor's cart.

        Anonymous visitors have no server-side cart, so a missing token is
        a silent no-op rather than a refusal.

        Returns:
            The emitted notice, or None when no token was given
        """
        if not auth_token:
            return None

        try:
            records = await self._client.fetch_cart(auth_token)
        except (KnownError, RefusalError) as e:
            return self._fail("load cart", e)

        self._replace_cart(records)
        return self._emit(Notice.success("Cart loaded"))

    async def set_quantity(
        self, auth_token: str | None, product_id: str, quantity: int
    ) -> Notice:
        """
        Ask the backend to hold exactly `quantity` of a product.

        Zero is passed through as a removal request; the item disappears
        once the backend's response omits it.

        Returns:
            The emitted notice
        """
        try:
            if not auth_token:
                raise AuthRequiredError()
            if quantity < 0:
                raise InvalidQuantityError(product_id, quantity)
            records = await self._client.upsert_cart_item(auth_token, product_id, quantity)
        except (KnownError, RefusalError) as e:
            return self._fail("set quantity", e)

        self._replace_cart(records)
        return self._emit(Notice.success("Cart updated"))

    async def add_product(self, auth_token: str | None, product_id: str) -> Notice:
        """
        Add one unit of a product that is not yet in the cart.

        Products already in the cart are refused; their quantity changes
        go through set_quantity().

        Returns:
            The emitted notice
        """
        try:
            if not auth_token:
                raise AuthRequiredError()
            if is_item_in_cart(self._cart_records, product_id):
                raise DuplicateCartItemError(product_id)
        except RefusalError as e:
            return self._fail("add product", e)

        return await self.set_quantity(auth_token, product_id, 1)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _next_catalog_ticket(self) -> int:
        self._catalog_ticket += 1
        return self._catalog_ticket

    def _is_stale(self, ticket: int) -> bool:
        return ticket < self._applied_ticket

    def _apply_catalog(self, ticket: int, catalog: Sequence[CatalogEntry]) -> None:
        self._applied_ticket = ticket
        self._catalog = list(catalog)
        self._catalog_loaded = True
        self._reconcile()

    def _replace_cart(self, records: Sequence[CartRecord]) -> None:
        self._cart_records = list(records)
        self._reconcile()

    def _reconcile(self) -> None:
        if not self._catalog_loaded:
            logger.debug(
                "Catalog not loaded yet, deferring merge of %d cart records",
                len(self._cart_records),
            )
            return

        self._reconciled = merge(self._cart_records, self._catalog)
        if self._on_change is not None:
            self._on_change(self._reconciled)

    def _fail(self, operation: str, error: KnownError | RefusalError) -> Notice:
        if isinstance(error, RefusalError):
            logger.info("Refused to %s: %s", operation, error.message)
        else:
            logger.warning("Failed to %s: %s (%s)", operation, error.message, error.detail)
        return self._emit(notice_from_error(error))

    def _emit(self, notice: Notice) -> Notice:
        self._notices.append(notice)
        if self._on_notice is not None:
            self._on_notice(notice)
        return notice

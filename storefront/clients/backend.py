"""
Storefront backend client.

Talks to the products and cart endpoints and translates every transport
or payload problem into the failure taxonomy in storefront.models.failure.
Nothing outside this module needs to know about httpx.
"""

import logging
from collections.abc import Callable
from typing import Any

import httpx
from pydantic import ValidationError

from storefront.config import settings
from storefront.models.cart import CartRecord, parse_cart
from storefront.models.catalog import CatalogEntry, parse_catalog
from storefront.models.failure import (
    AuthRequiredError,
    BackendRejectedError,
    CatalogNotFoundError,
    KnownError,
    ProductNotFoundError,
    TransientFaultError,
)

logger = logging.getLogger(__name__)

CATALOG_FAULT_MESSAGE = "Something went wrong. Check the backend console for more details"
CART_FAULT_MESSAGE = (
    "Could not fetch cart details. "
    "Check that the backend is running, reachable and returns valid JSON."
)
UPSERT_FAULT_MESSAGE = "Something went wrong"


def _error_message(response: httpx.Response) -> str | None:
    """Extract the backend's `message` field from an error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return None


class StorefrontClient:
    """
    Client for the storefront REST backend.

    Endpoints (relative to base_url):
        GET  /products
        GET  /products/search?value=<query>
        GET  /cart            (Bearer token)
        POST /cart            (Bearer token, {"productId", "qty"})
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        """
        Initialize the storefront client.

        Args:
            base_url: Backend API base URL. Defaults to settings.backend_url.
            timeout: Request timeout in seconds. Defaults to settings.request_timeout.
        """
        self.base_url = (base_url or settings.backend_url).rstrip("/")
        self.timeout = settings.request_timeout if timeout is None else timeout

    async def fetch_catalog(self) -> list[CatalogEntry]:
        """
        Fetch the full product catalog.

        Raises:
            TransientFaultError: If the backend is unreachable or the payload is malformed
        """
        payload = await self._request("GET", "/products", fault_message=CATALOG_FAULT_MESSAGE)
        return self._parse(parse_catalog, payload, CATALOG_FAULT_MESSAGE)

    async def search_catalog(self, query: str) -> list[CatalogEntry]:
        """
        Search the catalog by name or category.

        Args:
            query: Text typed by the visitor

        Returns:
            Matching entries, never empty

        Raises:
            CatalogNotFoundError: If nothing matches (HTTP 404 or an empty list)
            TransientFaultError: On any other failure
        """
        payload = await self._request(
            "GET",
            "/products/search",
            params={"value": query},
            fault_message=CATALOG_FAULT_MESSAGE,
            on_not_found=lambda _response: CatalogNotFoundError(query),
        )
        entries = self._parse(parse_catalog, payload, CATALOG_FAULT_MESSAGE)
        if not entries:
            raise CatalogNotFoundError(query)
        return entries

    async def fetch_cart(self, auth_token: str | None) -> list[CartRecord]:
        """
        Fetch the visitor's cart.

        Raises:
            AuthRequiredError: If no token is given (no request is sent) or it is rejected
            BackendRejectedError: If the backend answers 400 with a message
            TransientFaultError: On any other failure
        """
        payload = await self._request(
            "GET",
            "/cart",
            auth_token=self._require_token(auth_token),
            fault_message=CART_FAULT_MESSAGE,
        )
        return self._parse(parse_cart, payload, CART_FAULT_MESSAGE)

    async def upsert_cart_item(
        self, auth_token: str | None, product_id: str, quantity: int
    ) -> list[CartRecord]:
        """
        Set the quantity of a product in the visitor's cart.

        The quantity is the full desired amount, not a delta. Zero removes
        the product on the backend.

        Returns:
            The backend's authoritative cart after the change

        Raises:
            AuthRequiredError: If no token is given (no request is sent) or it is rejected
            ProductNotFoundError: If the backend does not know the product
            BackendRejectedError: If the backend answers 400 with a message
            TransientFaultError: On any other failure
        """
        payload = await self._request(
            "POST",
            "/cart",
            auth_token=self._require_token(auth_token),
            json={"productId": product_id, "qty": quantity},
            fault_message=UPSERT_FAULT_MESSAGE,
            on_not_found=lambda response: ProductNotFoundError(
                product_id, _error_message(response)
            ),
        )
        return self._parse(parse_cart, payload, UPSERT_FAULT_MESSAGE)

    @staticmethod
    def _require_token(auth_token: str | None) -> str:
        if not auth_token:
            raise AuthRequiredError(detail="No auth token present")
        return auth_token

    async def _request(
        self,
        method: str,
        path: str,
        *,
        fault_message: str,
        auth_token: str | None = None,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        on_not_found: Callable[[httpx.Response], KnownError] | None = None,
    ) -> Any:
        headers = {"Authorization": f"Bearer {auth_token}"} if auth_token else None
        url = f"{self.base_url}{path}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method, url, headers=headers, params=params, json=json
                )
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            raise self._translate_status(e.response, fault_message, on_not_found) from e
        except httpx.RequestError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise TransientFaultError(fault_message, detail=str(e)) from e
        except ValueError as e:
            logger.warning("%s %s returned a body that is not JSON", method, path)
            raise TransientFaultError(fault_message, detail="Response body is not valid JSON") from e

    @staticmethod
    def _translate_status(
        response: httpx.Response,
        fault_message: str,
        on_not_found: Callable[[httpx.Response], KnownError] | None,
    ) -> KnownError | AuthRequiredError:
        status = response.status_code
        logger.warning("%s %s returned HTTP %d", response.request.method, response.url.path, status)

        if status == 404 and on_not_found is not None:
            return on_not_found(response)
        if status == 401:
            return AuthRequiredError(detail=f"HTTP {status}")
        if status == 400:
            message = _error_message(response)
            if message:
                return BackendRejectedError(message, status_code=status)
        return TransientFaultError(fault_message, detail=f"HTTP {status}", status_code=status)

    @staticmethod
    def _parse(parser: Callable[[Any], list[Any]], payload: Any, fault_message: str) -> list[Any]:
        try:
            return parser(payload)
        except ValidationError as e:
            logger.warning("Malformed payload from backend: %d validation errors", e.error_count())
            raise TransientFaultError(fault_message, detail="Malformed response payload") from e


# Default client instance
_client: StorefrontClient | None = None


def get_storefront_client() -> StorefrontClient:
    """
    Get the default storefront client instance.

    Returns:
        Singleton StorefrontClient instance
    """
    global _client
    if _client is None:
        _client = StorefrontClient()
    return _client


def reset_storefront_client() -> None:
    """Drop the default client so the next call rebuilds it from settings."""
    global _client
    _client = None

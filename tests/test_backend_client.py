"""Tests for the storefront backend client."""

import json

import httpx
import pytest
import respx

from conftest import BASE_URL
from storefront.clients.backend import (
    CART_FAULT_MESSAGE,
    StorefrontClient,
    get_storefront_client,
)
from storefront.models.cart import CartRecord
from storefront.models.failure import (
    AuthRequiredError,
    BackendRejectedError,
    CatalogNotFoundError,
    ProductNotFoundError,
    TransientFaultError,
)


@pytest.fixture
def client() -> StorefrontClient:
    return StorefrontClient(base_url=BASE_URL)


class TestStorefrontClientInit:
    def test_init_with_default_url(self) -> None:
        """Client uses settings URL by default."""
        client = StorefrontClient()
        assert client.base_url == "https://qkart-frontend-yas.herokuapp.com/api/v1"

    def test_init_strips_trailing_slash(self) -> None:
        client = StorefrontClient(base_url="https://custom.example.com/api/")
        assert client.base_url == "https://custom.example.com/api"

    def test_init_with_custom_timeout(self) -> None:
        client = StorefrontClient(timeout=5.0)
        assert client.timeout == 5.0

    def test_default_client_is_shared(self) -> None:
        assert get_storefront_client() is get_storefront_client()


class TestFetchCatalog:
    @respx.mock
    async def test_returns_entries(
        self, client: StorefrontClient, sample_products_payload: list[dict]
    ) -> None:
        respx.get(f"{BASE_URL}/products").mock(
            return_value=httpx.Response(200, json=sample_products_payload)
        )

        catalog = await client.fetch_catalog()

        assert [entry.id for entry in catalog] == ["v4sLtEcMpzabRyfx", "upLK9JbQ4rMhTwt4"]
        assert catalog[0].name == "iPhone XR"

    @respx.mock
    async def test_server_error_is_transient(self, client: StorefrontClient) -> None:
        respx.get(f"{BASE_URL}/products").mock(
            return_value=httpx.Response(
                500,
                json={"success": False, "message": "Something went wrong"},
            )
        )

        with pytest.raises(TransientFaultError) as exc_info:
            await client.fetch_catalog()

        assert exc_info.value.status_code == 500
        assert "backend console" in exc_info.value.message

    @respx.mock
    async def test_connection_error_is_transient(self, client: StorefrontClient) -> None:
        respx.get(f"{BASE_URL}/products").mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(TransientFaultError):
            await client.fetch_catalog()

    @respx.mock
    async def test_invalid_json_is_transient(self, client: StorefrontClient) -> None:
        respx.get(f"{BASE_URL}/products").mock(
            return_value=httpx.Response(200, text="<html>maintenance</html>")
        )

        with pytest.raises(TransientFaultError, match="backend console"):
            await client.fetch_catalog()

    @respx.mock
    async def test_malformed_payload_is_transient(self, client: StorefrontClient) -> None:
        respx.get(f"{BASE_URL}/products").mock(
            return_value=httpx.Response(200, json=[{"_id": "x"}])
        )

        with pytest.raises(TransientFaultError) as exc_info:
            await client.fetch_catalog()

        assert exc_info.value.detail == "Malformed response payload"


class TestSearchCatalog:
    @respx.mock
    async def test_sends_query_as_value_param(
        self, client: StorefrontClient, sample_products_payload: list[dict]
    ) -> None:
        route = respx.get(f"{BASE_URL}/products/search").mock(
            return_value=httpx.Response(200, json=sample_products_payload[:1])
        )

        results = await client.search_catalog("iphone")

        assert len(results) == 1
        assert route.calls.last.request.url.params["value"] == "iphone"

    @respx.mock
    async def test_404_is_not_found(self, client: StorefrontClient) -> None:
        respx.get(f"{BASE_URL}/products/search").mock(return_value=httpx.Response(404, json=[]))

        with pytest.raises(CatalogNotFoundError) as exc_info:
            await client.search_catalog("unicorn")

        assert exc_info.value.query == "unicorn"

    @respx.mock
    async def test_empty_result_is_not_found(self, client: StorefrontClient) -> None:
        respx.get(f"{BASE_URL}/products/search").mock(return_value=httpx.Response(200, json=[]))

        with pytest.raises(CatalogNotFoundError):
            await client.search_catalog("unicorn")

    @respx.mock
    async def test_server_error_is_transient(self, client: StorefrontClient) -> None:
        respx.get(f"{BASE_URL}/products/search").mock(return_value=httpx.Response(502))

        with pytest.raises(TransientFaultError):
            await client.search_catalog("phone")


class TestFetchCart:
    async def test_missing_token_makes_no_request(self, client: StorefrontClient) -> None:
        with respx.mock(assert_all_called=False) as router:
            route = router.get(f"{BASE_URL}/cart")

            with pytest.raises(AuthRequiredError):
                await client.fetch_cart(None)

            assert not route.called

    @respx.mock
    async def test_sends_bearer_token(self, client: StorefrontClient) -> None:
        route = respx.get(f"{BASE_URL}/cart").mock(
            return_value=httpx.Response(
                200,
                json=[
                    {"productId": "KCRwjF7lN97HnEaY", "qty": 3},
                    {"productId": "BW0jAAeDJmlZCF8i", "qty": 1},
                ],
            )
        )

        records = await client.fetch_cart("secret-token")

        assert records == [
            CartRecord(product_id="KCRwjF7lN97HnEaY", quantity=3),
            CartRecord(product_id="BW0jAAeDJmlZCF8i", quantity=1),
        ]
        assert route.calls.last.request.headers["Authorization"] == "Bearer secret-token"

    @respx.mock
    async def test_400_carries_backend_message(self, client: StorefrontClient) -> None:
        respx.get(f"{BASE_URL}/cart").mock(
            return_value=httpx.Response(
                400, json={"success": False, "message": "Cart could not be read"}
            )
        )

        with pytest.raises(BackendRejectedError) as exc_info:
            await client.fetch_cart("token")

        assert exc_info.value.message == "Cart could not be read"

    @respx.mock
    async def test_401_is_auth_required(self, client: StorefrontClient) -> None:
        respx.get(f"{BASE_URL}/cart").mock(
            return_value=httpx.Response(
                401,
                json={
                    "success": False,
                    "message": "Protected route, Oauth2 Bearer token not found",
                },
            )
        )

        with pytest.raises(AuthRequiredError):
            await client.fetch_cart("expired")

    @respx.mock
    async def test_other_failure_uses_cart_message(self, client: StorefrontClient) -> None:
        respx.get(f"{BASE_URL}/cart").mock(return_value=httpx.Response(503))

        with pytest.raises(TransientFaultError) as exc_info:
            await client.fetch_cart("token")

        assert exc_info.value.message == CART_FAULT_MESSAGE


class TestUpsertCartItem:
    @respx.mock
    async def test_posts_full_quantity(self, client: StorefrontClient) -> None:
        route = respx.post(f"{BASE_URL}/cart").mock(
            return_value=httpx.Response(200, json=[{"productId": "A", "qty": 3}])
        )

        records = await client.upsert_cart_item("token", "A", 3)

        assert records == [CartRecord(product_id="A", quantity=3)]
        request = route.calls.last.request
        assert json.loads(request.content) == {"productId": "A", "qty": 3}
        assert request.headers["Authorization"] == "Bearer token"

    @respx.mock
    async def test_zero_quantity_is_sent_unchanged(self, client: StorefrontClient) -> None:
        route = respx.post(f"{BASE_URL}/cart").mock(return_value=httpx.Response(200, json=[]))

        records = await client.upsert_cart_item("token", "A", 0)

        assert records == []
        assert json.loads(route.calls.last.request.content) == {"productId": "A", "qty": 0}

    async def test_missing_token_makes_no_request(self, client: StorefrontClient) -> None:
        with respx.mock(assert_all_called=False) as router:
            route = router.post(f"{BASE_URL}/cart")

            with pytest.raises(AuthRequiredError):
                await client.upsert_cart_item("", "A", 1)

            assert not route.called

    @respx.mock
    async def test_404_is_product_not_found(self, client: StorefrontClient) -> None:
        respx.post(f"{BASE_URL}/cart").mock(
            return_value=httpx.Response(
                404, json={"success": False, "message": "Product doesn't exist"}
            )
        )

        with pytest.raises(ProductNotFoundError) as exc_info:
            await client.upsert_cart_item("token", "missing", 1)

        assert exc_info.value.product_id == "missing"
        assert exc_info.value.message == "Product doesn't exist"

    @respx.mock
    async def test_timeout_is_transient(self, client: StorefrontClient) -> None:
        respx.post(f"{BASE_URL}/cart").mock(side_effect=httpx.ReadTimeout("slow"))

        with pytest.raises(TransientFaultError) as exc_info:
            await client.upsert_cart_item("token", "A", 1)

        assert exc_info.value.message == "Something went wrong"

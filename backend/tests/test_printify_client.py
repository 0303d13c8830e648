"""Tests for the Printify client: real client over a mock transport + fake client."""
import httpx
import pytest

from storefront.core.exceptions import InvalidCatalogResponseError, UpstreamNotConfiguredError
from storefront.integrations.printify.client import (
    FakePrintifyClient,
    PrintifyClient,
    PrintifyClientProtocol,
    get_shop_config,
)
from tests.factories import make_raw_product


def _client(handler, **kwargs) -> PrintifyClient:
    return PrintifyClient(
        api_key=kwargs.pop("api_key", "test-token"),
        shop_id=kwargs.pop("shop_id", "22732326"),
        base_url="https://api.printify.test/v1",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestGetShopConfig:
    def test_known_shops(self):
        assert get_shop_config("22108081").sales_channel == "storefront"
        assert get_shop_config(22732326).title == "NoTrumpNWay Store"

    def test_unknown_shop_uses_primary(self):
        assert get_shop_config("1").title == "NoTrumpNWay Store"


class TestPrintifyClient:
    def test_implements_protocol(self):
        assert isinstance(PrintifyClient(api_key="x"), PrintifyClientProtocol)

    def test_not_configured_without_key(self):
        assert PrintifyClient(api_key="").is_configured is False

    @pytest.mark.asyncio
    async def test_get_products_request(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["secret"] = request.headers.get("X-Printify-Secret")
            return httpx.Response(200, json={"data": [make_raw_product()], "current_page": 2})

        payload = await _client(handler, secret="s3cret").get_products(page=2)
        assert seen["url"] == "https://api.printify.test/v1/shops/22732326/products.json?page=2"
        assert seen["auth"] == "Bearer test-token"
        assert seen["secret"] == "s3cret"
        assert payload["current_page"] == 2

    @pytest.mark.asyncio
    async def test_no_secret_header_by_default(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert "X-Printify-Secret" not in request.headers
            return httpx.Response(200, json={"data": []})

        await _client(handler).get_products()

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        client = _client(lambda request: httpx.Response(401, json={"error": "Unauthenticated"}))
        with pytest.raises(httpx.HTTPStatusError):
            await client.get_products()

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        client = _client(lambda request: httpx.Response(200, text="<html>maintenance</html>"))
        with pytest.raises(InvalidCatalogResponseError):
            await client.get_products()

    @pytest.mark.asyncio
    async def test_unconfigured_client_does_not_send(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("request should not be sent")

        with pytest.raises(UpstreamNotConfiguredError):
            await _client(handler, api_key="").get_products()

    @pytest.mark.asyncio
    async def test_get_product_not_found(self):
        client = _client(lambda request: httpx.Response(404, json={"error": "Not found"}))
        assert await client.get_product("missing") is None

    @pytest.mark.asyncio
    async def test_get_product(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/v1/shops/22732326/products/abc.json"
            return httpx.Response(200, json=make_raw_product(product_id="abc"))

        assert (await _client(handler).get_product("abc"))["id"] == "abc"

    @pytest.mark.asyncio
    async def test_get_shop_info(self):
        client = _client(lambda request: httpx.Response(
            200, json={"id": 22732326, "title": "NoTrumpNWay Store", "sales_channel": "custom_integration"},
        ))
        info = await client.get_shop_info()
        assert info.title == "NoTrumpNWay Store"
        assert info.status is None


class TestFakePrintifyClient:
    def test_implements_protocol(self):
        assert isinstance(FakePrintifyClient(), PrintifyClientProtocol)

    @pytest.mark.asyncio
    async def test_products_page(self):
        client = FakePrintifyClient([make_raw_product()])
        payload = await client.get_products()
        assert payload["total"] == 1
        assert client.calls == [("get_products", 1)]

    @pytest.mark.asyncio
    async def test_raises_configured_error(self):
        client = FakePrintifyClient(error=httpx.ConnectTimeout("slow"))
        with pytest.raises(httpx.ConnectTimeout):
            await client.get_product("x")

    @pytest.mark.asyncio
    async def test_shop_info(self):
        info = await FakePrintifyClient(shop_id="22108081").get_shop_info()
        assert info.sales_channel == "storefront"

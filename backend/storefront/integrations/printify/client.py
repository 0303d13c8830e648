import logging
from typing import Any, Protocol, runtime_checkable

import httpx

from storefront.core.config import settings
from storefront.core.exceptions import InvalidCatalogResponseError, UpstreamNotConfiguredError
from storefront.integrations.printify.models import PrintifyShopInfo, ShopConfig

logger = logging.getLogger(__name__)

_SHOP_CONFIGS: dict[str, ShopConfig] = {
    "22732326": ShopConfig(title="NoTrumpNWay Store", sales_channel="custom_integration"),
    "22108081": ShopConfig(title="NoTrumpNWay", sales_channel="storefront"),
}
_DEFAULT_SHOP_ID = "22732326"


def get_shop_config(shop_id: str | int) -> ShopConfig:
    """Known shop titles and sales channels; unknown ids get the primary shop."""
    return _SHOP_CONFIGS.get(str(shop_id), _SHOP_CONFIGS[_DEFAULT_SHOP_ID])


@runtime_checkable
class PrintifyClientProtocol(Protocol):
    shop_id: str

    @property
    def is_configured(self) -> bool: ...
    async def get_products(self, page: int = 1) -> Any: ...
    async def get_product(self, product_id: str) -> dict[str, Any] | None: ...
    async def get_shop_info(self) -> PrintifyShopInfo: ...


class PrintifyClient:
    """Printify REST client. One request per call, no retries."""

    def __init__(
        self,
        api_key: str | None = None,
        shop_id: str | None = None,
        secret: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key = settings.printify_api_key if api_key is None else api_key
        self._secret = settings.openssl_secret if secret is None else secret
        self.shop_id = str(shop_id or settings.printify_shop_id)
        self._base_url = (base_url or settings.printify_api_base).rstrip("/")
        self._timeout = timeout or settings.printify_timeout_seconds
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key and self.shop_id)

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
            "User-Agent": settings.printify_user_agent,
        }
        if self._secret:
            headers["X-Printify-Secret"] = self._secret
        return headers

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        if not self.is_configured:
            raise UpstreamNotConfiguredError()
        async with httpx.AsyncClient(
            base_url=self._base_url, timeout=self._timeout, transport=self._transport,
        ) as client:
            return await client.get(path, params=params, headers=self._headers())

    @staticmethod
    def _json(resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            content_type = resp.headers.get("content-type", "")
            raise InvalidCatalogResponseError(
                f"Printify API returned non-JSON body (content-type: {content_type or 'unknown'})"
            ) from e

    async def get_products(self, page: int = 1) -> Any:
        resp = await self._get(f"/shops/{self.shop_id}/products.json", params={"page": page})
        resp.raise_for_status()
        data = self._json(resp)
        logger.info(
            "Printify returned products page for shop %s (status %d, keys: %s)",
            self.shop_id,
            resp.status_code,
            list(data.keys()) if isinstance(data, dict) else type(data).__name__,
        )
        return data

    async def get_product(self, product_id: str) -> dict[str, Any] | None:
        resp = await self._get(f"/shops/{self.shop_id}/products/{product_id}.json")
        if resp.status_code == 404:
            logger.info("Printify product %s not found in shop %s", product_id, self.shop_id)
            return None
        resp.raise_for_status()
        data = self._json(resp)
        if not isinstance(data, dict):
            raise InvalidCatalogResponseError("Printify product response is not an object")
        return data

    async def get_shop_info(self) -> PrintifyShopInfo:
        resp = await self._get(f"/shops/{self.shop_id}.json")
        resp.raise_for_status()
        data = self._json(resp)
        if not isinstance(data, dict):
            raise InvalidCatalogResponseError("Printify shop response is not an object")
        return PrintifyShopInfo(
            id=data.get("id", self.shop_id),
            title=data.get("title", ""),
            sales_channel=data.get("sales_channel", ""),
            status=data.get("status"),
            products_count=data.get("products_count"),
        )


class FakePrintifyClient:
    """Test double for PrintifyClient."""

    def __init__(
        self,
        products: list[dict[str, Any]] | None = None,
        *,
        payload: Any = None,
        error: Exception | None = None,
        configured: bool = True,
        shop_id: str = _DEFAULT_SHOP_ID,
    ):
        self._products = products or []
        self._payload = payload
        self._error = error
        self._configured = configured
        self.shop_id = shop_id
        self.calls: list[tuple[str, Any]] = []

    @property
    def is_configured(self) -> bool:
        return self._configured

    async def get_products(self, page: int = 1) -> Any:
        self.calls.append(("get_products", page))
        if self._error:
            raise self._error
        if self._payload is not None:
            return self._payload
        return {
            "data": self._products,
            "current_page": page,
            "last_page": 1,
            "total": len(self._products),
        }

    async def get_product(self, product_id: str) -> dict[str, Any] | None:
        self.calls.append(("get_product", product_id))
        if self._error:
            raise self._error
        return next(
            (p for p in self._products if isinstance(p, dict) and str(p.get("id")) == product_id),
            None,
        )

    async def get_shop_info(self) -> PrintifyShopInfo:
        self.calls.append(("get_shop_info", None))
        if self._error:
            raise self._error
        config = get_shop_config(self.shop_id)
        return PrintifyShopInfo(
            id=self.shop_id,
            title=config.title,
            sales_channel=config.sales_channel,
            status="active",
            products_count=len(self._products),
        )

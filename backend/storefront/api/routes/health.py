import time

import httpx
from fastapi import APIRouter, Depends

from storefront.api.dependencies.printify import get_printify_client
from storefront.core.exceptions import UpstreamError
from storefront.integrations.printify.client import PrintifyClientProtocol
from storefront.models.dto.health import HealthResponse

router = APIRouter(tags=["health"])


async def _check_printify(client: PrintifyClientProtocol) -> dict:
    if not client.is_configured:
        return {"status": "not_configured", "shop_id": client.shop_id}
    try:
        start = time.monotonic()
        shop = await client.get_shop_info()
        latency_ms = round((time.monotonic() - start) * 1000)
        return {"status": "up", "latency_ms": latency_ms, "shop_id": shop.id, "shop_title": shop.title}
    except (httpx.HTTPError, UpstreamError) as e:
        return {"status": "down", "shop_id": client.shop_id, "error": type(e).__name__}


@router.get("/health", response_model=HealthResponse)
async def health_check(client: PrintifyClientProtocol = Depends(get_printify_client)):
    checks = {"printify": await _check_printify(client)}
    # The catalog keeps serving sample data while Printify is unavailable.
    overall = "healthy" if checks["printify"]["status"] == "up" else "degraded"
    return HealthResponse(status=overall, version="1.0.0", checks=checks)

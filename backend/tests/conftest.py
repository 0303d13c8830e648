import pytest

from storefront.services.cart_service import CartStore
from tests.factories import make_raw_product, make_shirt


# ── Patch settings before any other import ──────────────────────────────────
@pytest.fixture(autouse=True)
def _patch_settings(monkeypatch):
    from storefront.core.config import settings
    monkeypatch.setattr(settings, "printify_api_key", "test-printify-key")
    monkeypatch.setattr(settings, "printify_shop_id", "22732326")
    monkeypatch.setattr(settings, "openssl_secret", "")
    monkeypatch.setattr(settings, "max_cart_quantity", 10)


@pytest.fixture
def raw_product():
    return make_raw_product()


@pytest.fixture
def shirt():
    return make_shirt()


@pytest.fixture
def cart_store():
    return CartStore(max_quantity=10)

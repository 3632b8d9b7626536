import os

os.environ.setdefault("SESSION_SECRET_KEY", "test-session-secret")
os.environ.setdefault("CATALOG_API_BASE_URL", "http://catalog.test")

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient

from app.services.cart import CartStore, ProductSnapshot


def make_product(product_id: str, price: str, title: str = None, vendor_name: str = "Clay & Kiln") -> ProductSnapshot:
    return ProductSnapshot(
        product_id=product_id,
        title=title or f"Product {product_id}",
        vendor_name=vendor_name,
        unit_price=Decimal(price),
        image_url=f"https://cdn.example.com/{product_id}.jpg",
    )


class FakeCatalog:
    """Stands in for the catalog API in router tests."""

    def __init__(self, products):
        self.products = {p.product_id: p for p in products}
        self.requested = []

    async def get_product(self, product_id):
        self.requested.append(product_id)
        return self.products.get(product_id)


@pytest.fixture
def store():
    return CartStore()


@pytest.fixture
def mug():
    return make_product("p1", "10.00", title="Stoneware Mug")


@pytest.fixture
def scarf():
    return make_product("p2", "5.50", title="Wool Scarf", vendor_name="Loom House")


@pytest.fixture
def candle():
    return make_product("p3", "4.50", title="Beeswax Candle", vendor_name="Hive Goods")


@pytest.fixture
def fake_catalog(mug, scarf, candle):
    return FakeCatalog([mug, scarf, candle])


@pytest.fixture
def cart_repository():
    from app.services.cart_repository import MemoryCartRepository

    return MemoryCartRepository()


@pytest.fixture
def client(fake_catalog, cart_repository):
    from app.main import app
    from app.api.dependencies import get_cart_repository, get_catalog_client

    app.dependency_overrides[get_catalog_client] = lambda: fake_catalog
    app.dependency_overrides[get_cart_repository] = lambda: cart_repository
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

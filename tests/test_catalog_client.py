import httpx
import pytest
from decimal import Decimal

from app.core.catalog_client import CatalogClient, CatalogError, product_from_payload


PRODUCT_PAYLOAD = {
    "_id": "p1",
    "title": "Stoneware Mug",
    "price": 10.5,
    "images": [{"url": "https://cdn.example.com/p1.jpg"}],
    "vendor": {"storeName": "Clay & Kiln", "_id": "v1"},
    "ratings": {"average": 4.8, "count": 12},
    "status": "active",
}


def make_client(handler) -> CatalogClient:
    return CatalogClient(base_url="http://catalog.test/", transport=httpx.MockTransport(handler))


def test_product_from_payload_maps_catalog_fields():
    product = product_from_payload(PRODUCT_PAYLOAD)

    assert product.product_id == "p1"
    assert product.title == "Stoneware Mug"
    assert product.vendor_name == "Clay & Kiln"
    assert product.unit_price == Decimal("10.5")
    assert product.image_url == "https://cdn.example.com/p1.jpg"


def test_product_from_payload_without_images():
    product = product_from_payload({"_id": "p2", "title": "Scarf", "price": "5.50", "vendor": {"storeName": "Loom"}})

    assert product.image_url is None
    assert product.unit_price == Decimal("5.50")


def test_product_from_payload_requires_price():
    with pytest.raises(CatalogError, match="Invalid product payload"):
        product_from_payload({"_id": "p2", "title": "Scarf"})


@pytest.mark.asyncio
async def test_get_product():
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(str(request.url))
        return httpx.Response(200, json=PRODUCT_PAYLOAD)

    client = make_client(handler)
    product = await client.get_product("p1")
    await client.close()

    assert requested == ["http://catalog.test/api/products/p1"]
    assert product.product_id == "p1"
    assert product.unit_price == Decimal("10.5")


@pytest.mark.asyncio
async def test_get_product_unwraps_envelope():
    client = make_client(lambda request: httpx.Response(200, json={"success": True, "product": PRODUCT_PAYLOAD}))

    product = await client.get_product("p1")
    await client.close()

    assert product.title == "Stoneware Mug"


@pytest.mark.asyncio
async def test_get_product_not_found():
    client = make_client(lambda request: httpx.Response(404, json={"message": "Product not found"}))

    product = await client.get_product("missing")
    await client.close()

    assert product is None


@pytest.mark.asyncio
async def test_get_product_server_error():
    client = make_client(lambda request: httpx.Response(500, text="boom"))

    with pytest.raises(CatalogError, match="500"):
        await client.get_product("p1")
    await client.close()


@pytest.mark.asyncio
async def test_get_product_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)

    with pytest.raises(CatalogError, match="connection refused"):
        await client.get_product("p1")
    await client.close()


def test_product_from_payload_requires_id():
    with pytest.raises(CatalogError, match="no id"):
        product_from_payload({"title": "Scarf", "price": "5.50"})


def test_product_from_payload_accepts_plain_id():
    assert product_from_payload({"id": 42, "title": "Scarf", "price": "5.50"}).product_id == "42"


@pytest.mark.parametrize("images", [["https://cdn.example.com/p2.jpg"], [None], "p2.jpg"])
def test_product_from_payload_rejects_malformed_images(images):
    with pytest.raises(CatalogError):
        product_from_payload({"_id": "p2", "title": "Scarf", "price": "5.50", "images": images})


@pytest.mark.parametrize("price", [-1, "-0.01", "NaN", "Infinity", "abc"])
def test_product_from_payload_rejects_invalid_price(price):
    with pytest.raises(CatalogError):
        product_from_payload({"_id": "p2", "title": "Scarf", "price": price})


@pytest.mark.asyncio
async def test_get_product_with_negative_price():
    client = make_client(lambda request: httpx.Response(200, json={**PRODUCT_PAYLOAD, "price": -1.0}))

    with pytest.raises(CatalogError, match="Invalid price"):
        await client.get_product("p1")
    await client.close()

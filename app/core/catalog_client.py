import logging
import httpx
from decimal import Decimal, InvalidOperation
from typing import Optional

from app.core.config import settings
from app.services.cart import ProductSnapshot

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Raised when the catalog API cannot be reached or answers with an error."""


def product_from_payload(data: dict) -> ProductSnapshot:
    """
    Map a catalog product payload to a snapshot.

    Accepts the catalog's own shape:
    {"_id": "p1", "title": "...", "price": 10.0,
     "vendor": {"storeName": "..."}, "images": [{"url": "..."}]}
    """
    if not isinstance(data, dict):
        raise CatalogError(f"Invalid product payload: {data!r}")

    product_id = data.get("_id") or data.get("id")
    if product_id is None:
        raise CatalogError(f"Product payload has no id: {data!r}")

    vendor = data.get("vendor") or {}
    images = data.get("images") or []
    if not isinstance(vendor, dict) or not isinstance(images, list):
        raise CatalogError(f"Invalid product payload: {data!r}")

    image_url = None
    if images:
        if not isinstance(images[0], dict):
            raise CatalogError(f"Invalid product image: {images[0]!r}")
        image_url = images[0].get("url")

    try:
        unit_price = Decimal(str(data["price"]))
    except (KeyError, InvalidOperation) as e:
        raise CatalogError(f"Invalid product payload: {data!r}") from e

    if not unit_price.is_finite() or unit_price < 0:
        raise CatalogError(f"Invalid price for product {product_id}: {data['price']!r}")

    return ProductSnapshot(
        product_id=str(product_id),
        title=data.get("title", ""),
        vendor_name=vendor.get("storeName", ""),
        unit_price=unit_price,
        image_url=image_url,
    )


class CatalogClient:
    """HTTP client for the product catalog API."""

    def __init__(self, base_url: str = None, timeout: float = None, transport: httpx.AsyncBaseTransport = None):
        self.base_url = (base_url or settings.CATALOG_API_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.CATALOG_TIMEOUT_SECONDS
        self.transport = transport
        self.client = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self.client is None:
            self.client = httpx.AsyncClient(timeout=self.timeout, transport=self.transport)
        return self.client

    async def get_product(self, product_id: str) -> Optional[ProductSnapshot]:
        """
        Fetch a product from the catalog.

        GET /api/products/{product_id}

        Returns None when the catalog does not know the product.
        """
        try:
            client = await self._get_client()
            logger.info(f"Fetching product {product_id} from catalog")
            response = await client.get(f"{self.base_url}/api/products/{product_id}")

            if response.status_code == 404:
                logger.info(f"Product {product_id} not found in catalog")
                return None

            response.raise_for_status()
            data = response.json()
            logger.debug(f"Catalog product payload: {data}")

        except httpx.HTTPStatusError as e:
            logger.error(f"Catalog request failed with status {e.response.status_code}: {e.response.text}")
            raise CatalogError(f"Failed to fetch product {product_id}: {e.response.status_code}")
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Catalog request failed: {str(e)}")
            raise CatalogError(f"Failed to fetch product {product_id}: {str(e)}")

        # Some catalog endpoints wrap the document as {"product": {...}}
        if isinstance(data, dict) and isinstance(data.get("product"), dict):
            data = data["product"]

        return product_from_payload(data)

    async def close(self):
        """Close HTTP client."""
        if self.client:
            await self.client.aclose()
            self.client = None


# Global instance
catalog_client = CatalogClient()

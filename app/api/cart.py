from fastapi import APIRouter, Depends, HTTPException
import logging

from app.api.dependencies import get_cart_id, get_cart_repository, get_cart_store, get_catalog_client
from app.core.catalog_client import CatalogClient, CatalogError
from app.schemas.cart import CartItemAdd, CartItemUpdate, CartResponse
from app.services.cart import CartStore
from app.services.cart_repository import MemoryCartRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/cart", tags=["cart"])


class CartSession:
    """Per-request handle on the caller's cart and where it is stored."""

    def __init__(
        self,
        cart_id: str = Depends(get_cart_id),
        store: CartStore = Depends(get_cart_store),
        repository: MemoryCartRepository = Depends(get_cart_repository)
    ):
        self.cart_id = cart_id
        self.store = store
        self.repository = repository

    def save_and_respond(self) -> CartResponse:
        """Persist the cart and render it."""
        self.repository.save(self.cart_id, self.store)
        return CartResponse.from_store(self.store)


@router.get("", response_model=CartResponse)
async def get_cart(store: CartStore = Depends(get_cart_store)):
    """Get current shopping cart."""
    return CartResponse.from_store(store)


@router.post("/add", response_model=CartResponse)
async def add_to_cart(
    item: CartItemAdd,
    cart: CartSession = Depends(),
    catalog: CatalogClient = Depends(get_catalog_client)
):
    """Add item to cart, incrementing the quantity if it is already there."""
    # Checked before the catalog lookup; pydantic already guarantees an int
    if item.quantity <= 0:
        raise HTTPException(status_code=400, detail="Quantity must be greater than 0")

    try:
        product = await catalog.get_product(item.product_id)
    except CatalogError as e:
        raise HTTPException(status_code=502, detail=str(e))

    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")

    cart.store.add(product, item.quantity)
    return cart.save_and_respond()


@router.put("/update", response_model=CartResponse)
async def update_cart_item(item: CartItemUpdate, cart: CartSession = Depends()):
    """Set item quantity. Zero or less removes the item."""
    cart.store.update_quantity(item.product_id, item.quantity)
    return cart.save_and_respond()


@router.delete("/remove/{product_id}", response_model=CartResponse)
async def remove_from_cart(product_id: str, cart: CartSession = Depends()):
    """Remove item from cart."""
    cart.store.remove(product_id)
    return cart.save_and_respond()


@router.post("/clear", response_model=CartResponse)
async def clear_cart(cart: CartSession = Depends()):
    """Clear entire cart."""
    cart.store.clear()
    return cart.save_and_respond()


@router.post("/open", response_model=CartResponse)
async def open_cart(cart: CartSession = Depends()):
    cart.store.open()
    return cart.save_and_respond()


@router.post("/close", response_model=CartResponse)
async def close_cart(cart: CartSession = Depends()):
    cart.store.close()
    return cart.save_and_respond()


@router.post("/toggle", response_model=CartResponse)
async def toggle_cart(cart: CartSession = Depends()):
    cart.store.toggle()
    return cart.save_and_respond()

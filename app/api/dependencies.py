from fastapi import Depends, Request

from app.core.catalog_client import CatalogClient, catalog_client
from app.services.cart import CartStore
from app.services.cart_repository import MemoryCartRepository, cart_repository

CART_ID_SESSION_KEY = "cart_id"


def get_cart_repository() -> MemoryCartRepository:
    return cart_repository


def get_cart_id(request: Request) -> str:
    """Cart id kept in the session cookie; a new one is issued on first use."""
    cart_id = request.session.get(CART_ID_SESSION_KEY)
    if not isinstance(cart_id, str) or not cart_id:
        cart_id = MemoryCartRepository.new_cart_id()
        request.session[CART_ID_SESSION_KEY] = cart_id
    return cart_id


def get_cart_store(
    cart_id: str = Depends(get_cart_id),
    repository: MemoryCartRepository = Depends(get_cart_repository)
) -> CartStore:
    """Dependency returning the caller's cart, loaded from server-side storage."""
    return repository.load(cart_id)


def get_catalog_client() -> CatalogClient:
    return catalog_client

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, MutableMapping

from app.services.cart import CartLineItem, CartStore

logger = logging.getLogger(__name__)


def _open_key(key: str) -> str:
    return f"{key}_open"


def _item_from_dict(data: dict) -> CartLineItem:
    unit_price = Decimal(str(data["unit_price"]))
    if not unit_price.is_finite() or unit_price < 0:
        raise ValueError(f"Invalid unit price: {data['unit_price']!r}")

    return CartLineItem(
        product_id=str(data["product_id"]),
        title=data["title"],
        vendor_name=data["vendor_name"],
        unit_price=unit_price,
        quantity=data["quantity"],
        image_url=data.get("image_url"),
    )


def _item_to_dict(item: CartLineItem) -> dict:
    return {
        "product_id": item.product_id,
        "title": item.title,
        "vendor_name": item.vendor_name,
        "unit_price": str(item.unit_price),
        "quantity": item.quantity,
        "image_url": item.image_url,
    }


def load_cart(session: MutableMapping[str, Any], key: str = "cart") -> CartStore:
    """
    Rebuild the cart stored in a session.
    Corrupted cart data is dropped from the session and an empty cart is returned.
    """
    raw_items = session.get(key, [])
    is_open = bool(session.get(_open_key(key), False))

    try:
        if not isinstance(raw_items, list):
            raise TypeError(f"Expected a list of cart items, got {type(raw_items).__name__}")
        items = [_item_from_dict(entry) for entry in raw_items]
        return CartStore.from_items(items, is_open=is_open)
    except (KeyError, TypeError, ValueError, InvalidOperation) as e:
        logger.warning(f"Discarding corrupted cart data in session: {e}")
        session.pop(key, None)
        store = CartStore()
        if is_open:
            store.open()
        return store


def save_cart(session: MutableMapping[str, Any], store: CartStore, key: str = "cart") -> None:
    """Write cart items and drawer state into the session."""
    session[key] = [_item_to_dict(item) for item in store.items]
    session[_open_key(key)] = store.is_open

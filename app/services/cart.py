import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class InvalidQuantity(ValueError):
    """Raised when a non-positive or non-integer quantity is added to the cart."""


class InvalidPrice(ValueError):
    """Raised when a product without a finite, non-negative price is added to the cart."""


@dataclass(frozen=True)
class CartLineItem:
    product_id: str
    title: str
    vendor_name: str
    unit_price: Decimal
    quantity: int = 1
    image_url: Optional[str] = None

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class ProductSnapshot:
    """Catalog data captured when a product is put in the cart."""
    product_id: str
    title: str
    vendor_name: str
    unit_price: Decimal
    image_url: Optional[str] = None


@dataclass(frozen=True)
class CartSnapshot:
    items: Tuple[CartLineItem, ...]
    total_items: int
    total_price: Decimal
    is_open: bool


def _check_integer(quantity) -> int:
    # bool is an int subclass but never a meaningful quantity
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantity(f"Quantity must be an integer, got {quantity!r}")
    return quantity


def _validate_quantity(quantity) -> int:
    quantity = _check_integer(quantity)
    if quantity <= 0:
        raise InvalidQuantity(f"Quantity must be greater than 0, got {quantity}")
    return quantity


def _validate_price(price) -> Decimal:
    if not isinstance(price, Decimal) or not price.is_finite() or price < 0:
        raise InvalidPrice(f"Unit price must be a non-negative decimal, got {price!r}")
    return price


class CartStore:
    """
    In-process shopping cart.

    Holds line items keyed by product id in insertion order, plus the
    open/closed flag of the cart drawer. Totals are computed on read.
    Line items are immutable; all mutations and reads are serialized by an
    internal lock.
    """

    def __init__(self):
        self._items: "OrderedDict[str, CartLineItem]" = OrderedDict()
        self._is_open = False
        self._lock = threading.RLock()

    @classmethod
    def from_items(cls, items, is_open: bool = False) -> "CartStore":
        """Rebuild a cart from previously stored line items."""
        store = cls()
        for item in items:
            _validate_quantity(item.quantity)
            _validate_price(item.unit_price)
            existing = store._items.get(item.product_id)
            if existing:
                store._items[item.product_id] = replace(existing, quantity=existing.quantity + item.quantity)
            else:
                store._items[item.product_id] = item
        store._is_open = bool(is_open)
        return store

    # Reads

    @property
    def items(self) -> Tuple[CartLineItem, ...]:
        with self._lock:
            return tuple(self._items.values())

    @property
    def is_open(self) -> bool:
        with self._lock:
            return self._is_open

    @property
    def total_items(self) -> int:
        with self._lock:
            return sum(item.quantity for item in self._items.values())

    @property
    def total_price(self) -> Decimal:
        with self._lock:
            return sum((item.subtotal for item in self._items.values()), ZERO)

    def get(self, product_id: str) -> Optional[CartLineItem]:
        with self._lock:
            return self._items.get(product_id)

    def snapshot(self) -> CartSnapshot:
        """Consistent view of items and totals, e.g. for order submission."""
        with self._lock:
            items = tuple(self._items.values())
            return CartSnapshot(
                items=items,
                total_items=sum(item.quantity for item in items),
                total_price=sum((item.subtotal for item in items), ZERO),
                is_open=self._is_open,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, product_id) -> bool:
        with self._lock:
            return product_id in self._items

    # Mutations

    def add(self, product: ProductSnapshot, quantity: int = 1) -> CartLineItem:
        """
        Add a product to the cart.
        If the product is already in the cart, its quantity is incremented and
        the display data captured on the first add is kept.
        """
        quantity = _validate_quantity(quantity)

        with self._lock:
            existing = self._items.get(product.product_id)
            if existing:
                line = replace(existing, quantity=existing.quantity + quantity)
            else:
                line = CartLineItem(
                    product_id=product.product_id,
                    title=product.title,
                    vendor_name=product.vendor_name,
                    unit_price=_validate_price(product.unit_price),
                    quantity=quantity,
                    image_url=product.image_url,
                )
            self._items[product.product_id] = line

        logger.info(f"Added to cart: product_id={product.product_id}, quantity={quantity}")
        return line

    def remove(self, product_id: str) -> None:
        """Remove an item. Removing an absent item is a no-op."""
        with self._lock:
            removed = self._items.pop(product_id, None)

        if removed is not None:
            logger.info(f"Removed from cart: product_id={product_id}")

    def update_quantity(self, product_id: str, quantity: int) -> None:
        """
        Set the absolute quantity of an item already in the cart.
        A quantity of zero or less removes the item; unknown items are ignored.
        """
        quantity = _check_integer(quantity)
        if quantity <= 0:
            self.remove(product_id)
            return

        with self._lock:
            line = self._items.get(product_id)
            if line is None:
                return
            self._items[product_id] = replace(line, quantity=quantity)

        logger.info(f"Updated cart item: product_id={product_id}, quantity={quantity}")

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
        logger.info("Cart cleared")

    # Drawer visibility

    def open(self) -> None:
        with self._lock:
            self._is_open = True

    def close(self) -> None:
        with self._lock:
            self._is_open = False

    def toggle(self) -> bool:
        with self._lock:
            self._is_open = not self._is_open
            return self._is_open

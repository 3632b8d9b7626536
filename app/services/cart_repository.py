import logging
import threading
import uuid
from typing import Any, Dict, Optional

from app.core.config import settings
from app.services.cart import CartStore
from app.services.cart_session import load_cart, save_cart

logger = logging.getLogger(__name__)


class MemoryCartRepository:
    """
    Server-side cart storage.

    Carts are kept as JSON-safe mappings keyed by an opaque cart id, so only
    the id has to travel in the session cookie.
    """

    def __init__(self, key: str = "cart"):
        self.key = key
        self._store: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def new_cart_id() -> str:
        return uuid.uuid4().hex

    def load(self, cart_id: Optional[str]) -> CartStore:
        with self._lock:
            data = self._store.get(cart_id, {}) if cart_id else {}
            return load_cart(dict(data), self.key)

    def save(self, cart_id: str, store: CartStore) -> None:
        data: Dict[str, Any] = {}
        save_cart(data, store, self.key)
        with self._lock:
            self._store[cart_id] = data
        logger.debug(f"Cart {cart_id} saved with {len(store)} line(s)")

    def delete(self, cart_id: str) -> None:
        with self._lock:
            self._store.pop(cart_id, None)
        logger.info(f"Cart {cart_id} deleted")

    def __contains__(self, cart_id) -> bool:
        with self._lock:
            return cart_id in self._store


# Global instance
cart_repository = MemoryCartRepository(settings.CART_SESSION_KEY)

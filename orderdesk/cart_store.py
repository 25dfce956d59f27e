# orderdesk/cart_store.py
import threading
from functools import lru_cache

from orderdesk.models.cart import OrderCart

# ---------------------------------------------------------
# Carts are ephemeral and live only in this process.
#
# - one cart per operator (keyed by the user id from the token)
# - created on first use, dropped after a successful submission
# - never persisted; a restart empties every in-progress cart
# - sync endpoints run in a thread pool, so every read/modify of an
#   operator's cart happens under that operator's lock
# ---------------------------------------------------------


class CartStore:
    """Process-local mapping of operator id -> OrderCart."""

    def __init__(self) -> None:
        self._carts: dict[int, OrderCart] = {}
        self._locks: dict[int, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def lock(self, user_id: int) -> threading.RLock:
        """The operator's cart lock; re-entrant so services can nest calls."""
        with self._locks_guard:
            return self._locks.setdefault(user_id, threading.RLock())

    def get(self, user_id: int) -> OrderCart | None:
        return self._carts.get(user_id)

    def put(self, user_id: int, cart: OrderCart) -> OrderCart:
        self._carts[user_id] = cart
        return cart

    def pop(self, user_id: int) -> OrderCart | None:
        return self._carts.pop(user_id, None)


@lru_cache
def get_cart_store() -> CartStore:
    """
    FastAPI dependency returning the process-wide cart store.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(store: CartStore = Depends(get_cart_store)):
            ...
    """
    return CartStore()

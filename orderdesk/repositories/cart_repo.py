# orderdesk/repositories/cart_repo.py
from orderdesk.cart_store import CartStore
from orderdesk.models.cart import OrderCart


class CartRepository:
    """
    Access to the operator carts held in a CartStore.

    Business logic (pricing, quantity rules) lives in OrderCart and the
    service; this class only finds, creates and discards carts.
    """

    def __init__(self, default_shipping_fee=0, currency_decimals: int = 0):
        self.default_shipping_fee = default_shipping_fee
        self.currency_decimals = currency_decimals

    def get_for_user(self, store: CartStore, user_id: int) -> OrderCart | None:
        return store.get(user_id)

    def get_or_create(self, store: CartStore, user_id: int) -> OrderCart:
        cart = store.get(user_id)
        if cart is None:
            cart = store.put(
                user_id,
                OrderCart(
                    default_shipping_fee=self.default_shipping_fee,
                    currency_decimals=self.currency_decimals,
                ),
            )
        return cart

    def discard(self, store: CartStore, user_id: int) -> None:
        store.pop(user_id)

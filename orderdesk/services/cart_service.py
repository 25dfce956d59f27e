# orderdesk/services/cart_service.py
import httpx
from fastapi import HTTPException, status

from orderdesk.cart_store import CartStore
from orderdesk.core.erp_client import erp_unavailable
from orderdesk.models.cart import OrderCart, quantize_money
from orderdesk.repositories.cart_repo import CartRepository
from orderdesk.repositories.product_repo import ProductRepository
from orderdesk.schemas.cart import (
    CartLineCreate,
    CartLineRead,
    CartLineUpdate,
    CartRead,
    CartSummaryRead,
    ShippingFeeUpdate,
)


class CartService:
    """
    Business logic for the operator's order cart.

    Responsibilities:
      - resolve products from the ERP catalog when a line is added
      - apply line edits / shipping fee to the in-memory cart
      - render the cart with per-line amounts and the derived summary
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    def _to_read(self, cart: OrderCart) -> CartRead:
        decimals = cart.currency_decimals
        lines = [
            CartLineRead(
                product_id=line.product_id,
                product_code=line.product_code,
                product_name=line.product_name,
                quantity=line.quantity,
                unit_price=line.unit_price,
                discount_percent=line.discount_percent,
                tax_rate=line.tax_rate,
                line_subtotal=quantize_money(line.subtotal, decimals),
                line_discount=quantize_money(line.discount, decimals),
                line_tax=quantize_money(line.tax, decimals),
                line_total=quantize_money(line.total, decimals),
            )
            for line in cart.lines
        ]
        summary = cart.summary
        return CartRead(
            lines=lines,
            summary=CartSummaryRead(
                subtotal=summary.subtotal,
                discount=summary.discount,
                tax=summary.tax,
                shipping=summary.shipping,
                total=summary.total,
            ),
            item_count=cart.item_count,
        )

    # ---- public operations ----

    def get_cart(self, store: CartStore, user_id: int) -> CartRead:
        with store.lock(user_id):
            cart = self.cart_repo.get_or_create(store, user_id)
            return self._to_read(cart)

    def add_line(
        self,
        store: CartStore,
        client: httpx.Client,
        user_id: int,
        payload: CartLineCreate,
    ) -> CartRead:
        """
        Add a product to the cart.

        Rules:
          - product must exist in the ERP catalog
          - same product again => quantities are merged into one line
          - price / tax default from the catalog
        """
        try:
            product = self.product_repo.get_by_id(client, payload.product_id)
        except httpx.HTTPError as exc:
            raise erp_unavailable("loading product", exc)

        if product is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )

        with store.lock(user_id):
            cart = self.cart_repo.get_or_create(store, user_id)
            cart.add_line(product, payload.quantity)
            return self._to_read(cart)

    def update_line(
        self,
        store: CartStore,
        user_id: int,
        product_id: int,
        payload: CartLineUpdate,
    ) -> CartRead:
        """
        Apply a partial edit to one line.

        Edits for a product that is not in the cart are ignored. Price and
        percentages are applied before quantity so a quantity <= 0 in the
        same request still removes the line.
        """
        with store.lock(user_id):
            cart = self.cart_repo.get_or_create(store, user_id)

            if payload.unit_price is not None:
                cart.update_price(product_id, payload.unit_price)
            if payload.discount_percent is not None:
                cart.update_discount(product_id, payload.discount_percent)
            if payload.tax_rate is not None:
                cart.update_tax(product_id, payload.tax_rate)
            if payload.quantity is not None:
                cart.update_quantity(product_id, payload.quantity)

            return self._to_read(cart)

    def remove_line(self, store: CartStore, user_id: int, product_id: int) -> CartRead:
        """Remove a product from the cart; no-op if it is not there."""
        with store.lock(user_id):
            cart = self.cart_repo.get_or_create(store, user_id)
            cart.remove_line(product_id)
            return self._to_read(cart)

    def set_shipping_fee(
        self,
        store: CartStore,
        user_id: int,
        payload: ShippingFeeUpdate,
    ) -> CartRead:
        with store.lock(user_id):
            cart = self.cart_repo.get_or_create(store, user_id)
            cart.set_shipping_fee(payload.shipping_fee)
            return self._to_read(cart)

    def clear_cart(self, store: CartStore, user_id: int) -> CartRead:
        """
        Empty the cart and reset shipping to the configured default.
        """
        with store.lock(user_id):
            cart = self.cart_repo.get_or_create(store, user_id)
            cart.clear()
            return self._to_read(cart)

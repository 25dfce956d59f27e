# orderdesk/routers/cart.py
import httpx
from fastapi import APIRouter, Depends

from orderdesk.cart_store import CartStore, get_cart_store
from orderdesk.core.auth import require_permission
from orderdesk.core.config import get_settings
from orderdesk.core.erp_client import get_erp_client
from orderdesk.models.user import SessionUser
from orderdesk.repositories.cart_repo import CartRepository
from orderdesk.repositories.product_repo import ProductRepository
from orderdesk.schemas.cart import (
    CartLineCreate,
    CartLineUpdate,
    CartRead,
    ShippingFeeUpdate,
)
from orderdesk.services.cart_service import CartService

settings = get_settings()

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository(
    default_shipping_fee=settings.DEFAULT_SHIPPING_FEE,
    currency_decimals=settings.CURRENCY_DECIMALS,
)
product_repo = ProductRepository()
service = CartService(cart_repo, product_repo)

require_order_entry = require_permission("create_sales_order")


@router.get("", response_model=CartRead)
def get_my_cart(
    store: CartStore = Depends(get_cart_store),
    current_user: SessionUser = Depends(require_order_entry),
):
    """
    Get the current operator's cart with its summary.

    Auth:
      - requires permission 'create_sales_order'
    """
    return service.get_cart(store, current_user.id)


@router.post("/lines", response_model=CartRead)
def add_cart_line(
    payload: CartLineCreate,
    store: CartStore = Depends(get_cart_store),
    client: httpx.Client = Depends(get_erp_client),
    current_user: SessionUser = Depends(require_order_entry),
):
    """
    Add a product (looked up in the ERP catalog) to the cart.

    Adding a product already in the cart increases its quantity.
    """
    return service.add_line(store, client, current_user.id, payload)


@router.patch("/lines/{product_id}", response_model=CartRead)
def update_cart_line(
    product_id: int,
    payload: CartLineUpdate,
    store: CartStore = Depends(get_cart_store),
    current_user: SessionUser = Depends(require_order_entry),
):
    """
    Edit quantity / unit price / discount % / tax % of a line.

    A quantity <= 0 removes the line.
    """
    return service.update_line(
        store=store,
        user_id=current_user.id,
        product_id=product_id,
        payload=payload,
    )


@router.delete("/lines/{product_id}", response_model=CartRead)
def remove_cart_line(
    product_id: int,
    store: CartStore = Depends(get_cart_store),
    current_user: SessionUser = Depends(require_order_entry),
):
    """
    Remove a product from the cart.
    """
    return service.remove_line(store, current_user.id, product_id)


@router.put("/shipping-fee", response_model=CartRead)
def set_shipping_fee(
    payload: ShippingFeeUpdate,
    store: CartStore = Depends(get_cart_store),
    current_user: SessionUser = Depends(require_order_entry),
):
    return service.set_shipping_fee(store, current_user.id, payload)


@router.delete("", response_model=CartRead)
def clear_cart(
    store: CartStore = Depends(get_cart_store),
    current_user: SessionUser = Depends(require_order_entry),
):
    """
    Clear the entire cart.

    Returns an empty cart with the default shipping fee.
    """
    return service.clear_cart(store, current_user.id)

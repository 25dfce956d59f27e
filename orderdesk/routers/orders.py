# orderdesk/routers/orders.py
import httpx
from fastapi import APIRouter, Depends, status

from orderdesk.cart_store import CartStore, get_cart_store
from orderdesk.core.auth import require_permission
from orderdesk.core.config import get_settings
from orderdesk.core.erp_client import get_erp_client
from orderdesk.models.user import SessionUser
from orderdesk.repositories.cart_repo import CartRepository
from orderdesk.repositories.customer_repo import CustomerRepository
from orderdesk.repositories.order_repo import SalesOrderRepository
from orderdesk.schemas.order import CreditCheckRead, OrderCheckout, SalesOrderSubmitted
from orderdesk.services.order_service import OrderService

settings = get_settings()

router = APIRouter(prefix="/orders", tags=["Orders"])

cart_repo = CartRepository(
    default_shipping_fee=settings.DEFAULT_SHIPPING_FEE,
    currency_decimals=settings.CURRENCY_DECIMALS,
)
customer_repo = CustomerRepository()
order_repo = SalesOrderRepository()
service = OrderService(cart_repo, customer_repo, order_repo)


@router.post("/credit-check", response_model=CreditCheckRead)
def credit_check(
    payload: OrderCheckout,
    store: CartStore = Depends(get_cart_store),
    client: httpx.Client = Depends(get_erp_client),
    current_user: SessionUser = Depends(require_permission("create_sales_order")),
):
    """
    Preview whether the current cart would pass the credit-limit check.
    Nothing is submitted.
    """
    return service.check_credit(store, client, current_user, payload)


@router.post(
    "",
    response_model=SalesOrderSubmitted,
    status_code=status.HTTP_201_CREATED,
)
def submit_order(
    payload: OrderCheckout,
    store: CartStore = Depends(get_cart_store),
    client: httpx.Client = Depends(get_erp_client),
    current_user: SessionUser = Depends(require_permission("create_sales_order")),
):
    """
    Submit the current cart to the ERP as a sales order.

    - 400 if the cart is empty or a credit order exceeds available credit
    - 403 if warehouse_id is not one the operator can access
    - 404 if the customer does not exist
    - the cart is cleared only after the ERP accepted the order
    """
    return service.submit_order(store, client, current_user, payload)

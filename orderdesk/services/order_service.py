# orderdesk/services/order_service.py
import logging

import httpx
from fastapi import HTTPException, status
from pydantic import ValidationError

from orderdesk.cart_store import CartStore
from orderdesk.core.erp_client import erp_unavailable
from orderdesk.core.permissions import PermissionSet
from orderdesk.models.cart import OrderCart
from orderdesk.models.user import SessionUser
from orderdesk.repositories.cart_repo import CartRepository
from orderdesk.repositories.customer_repo import CustomerRepository
from orderdesk.repositories.order_repo import SalesOrderRepository
from orderdesk.schemas.customer import CustomerRef
from orderdesk.schemas.order import (
    CreditCheckRead,
    OrderCheckout,
    SalesOrderCreate,
    SalesOrderDetailCreate,
    SalesOrderSubmitted,
)
from orderdesk.services.credit_service import CREDIT_METHOD, check_credit

logger = logging.getLogger(__name__)


class OrderService:
    """
    Business logic for submitting the operator's cart as a sales order.

    Responsibilities:
      - load the customer's credit snapshot
      - run the credit-limit check (credit payment method only)
      - build the creation request from the cart, once
      - hand it to the ERP and discard the cart after success
    """

    def __init__(
        self,
        cart_repo: CartRepository,
        customer_repo: CustomerRepository,
        order_repo: SalesOrderRepository,
    ):
        self.cart_repo = cart_repo
        self.customer_repo = customer_repo
        self.order_repo = order_repo

    # -------- helpers --------

    def _get_customer(self, client: httpx.Client, customer_id: int) -> CustomerRef:
        try:
            customer = self.customer_repo.get_by_id(client, customer_id)
        except httpx.HTTPError as exc:
            raise erp_unavailable("loading customer", exc)

        if customer is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Customer not found",
            )
        return customer

    def _evaluate(
        self,
        cart: OrderCart,
        customer: CustomerRef,
        payload: OrderCheckout,
    ) -> CreditCheckRead:
        cart_total = cart.summary.total
        decision = check_credit(
            cart_total=cart_total,
            paid_amount=payload.paid_amount,
            payment_method=payload.payment_method,
            credit_limit=customer.credit_limit,
            current_debt=customer.current_debt,
        )
        return CreditCheckRead(
            customer_id=customer.id,
            payment_method=payload.payment_method,
            cart_total=cart_total,
            paid_amount=payload.paid_amount,
            debt_amount=decision.debt_amount,
            available_credit=decision.available_credit,
            exceeds=decision.exceeds,
        )

    @staticmethod
    def build_request(cart: OrderCart, payload: OrderCheckout) -> SalesOrderCreate:
        """
        Convert the cart + checkout form into the ERP creation request.

        paidAmount is the operator's prepayment for credit orders; for every
        other method the order is considered paid in full (cart total).
        """
        summary = cart.summary
        if payload.payment_method == CREDIT_METHOD:
            paid_amount = payload.paid_amount
        else:
            paid_amount = summary.total

        return SalesOrderCreate(
            customer_id=payload.customer_id,
            warehouse_id=payload.warehouse_id,
            sales_channel=payload.sales_channel,
            delivery_address=payload.delivery_address,
            shipping_fee=summary.shipping,
            payment_method=payload.payment_method,
            paid_amount=paid_amount,
            notes=payload.notes,
            details=[
                SalesOrderDetailCreate(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    discount_percent=line.discount_percent,
                    tax_rate=line.tax_rate,
                )
                for line in cart.lines
            ],
        )

    # -------- operations --------

    @staticmethod
    def ensure_warehouse_access(perms: PermissionSet, warehouse_id: int | None) -> None:
        """
        Orders may only name a warehouse the operator can access.
        No warehouse => the ERP picks its default.
        """
        if warehouse_id is None or perms.has_warehouse_access(warehouse_id):
            return
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"No access to warehouse {warehouse_id}",
        )

    def check_credit(
        self,
        store: CartStore,
        client: httpx.Client,
        user: SessionUser,
        payload: OrderCheckout,
    ) -> CreditCheckRead:
        """
        Preview the credit decision for the current cart without submitting.
        """
        self.ensure_warehouse_access(user.perms, payload.warehouse_id)
        customer = self._get_customer(client, payload.customer_id)
        with store.lock(user.id):
            cart = self.cart_repo.get_or_create(store, user.id)
            return self._evaluate(cart, customer, payload)

    def submit_order(
        self,
        store: CartStore,
        client: httpx.Client,
        user: SessionUser,
        payload: OrderCheckout,
    ) -> SalesOrderSubmitted:
        """
        Submit the current cart as a sales order.

        Steps:
          1. Warehouse (if given) must be accessible to the operator.
          2. Cart must have at least one line.
          3. Customer must exist in the ERP.
          4. Credit orders must stay within available credit.
          5. Build the creation request and POST it.
          6. Discard the cart once the ERP accepted the order.

        Steps 2-6 hold the operator's cart lock, so edits made while the
        ERP call is in flight wait for it instead of being dropped.
        """
        # 1) Warehouse scope
        self.ensure_warehouse_access(user.perms, payload.warehouse_id)

        with store.lock(user.id):
            # 2) Load cart
            cart = self.cart_repo.get_for_user(store, user.id)
            if cart is None or cart.is_empty():
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Cart is empty",
                )

            # 3) Customer + 4) credit limit
            customer = self._get_customer(client, payload.customer_id)
            credit = self._evaluate(cart, customer, payload)
            if credit.exceeds:
                logger.info(
                    f"Order refused for customer {customer.id}: debt "
                    f"{credit.debt_amount} exceeds available credit {credit.available_credit}"
                )
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail={
                        "message": "Order exceeds the customer's credit limit. "
                        "Increase the prepayment or change the payment method.",
                        "debt_amount": float(credit.debt_amount),
                        "available_credit": float(credit.available_credit),
                    },
                )

            # 5) Build + send
            request = self.build_request(cart, payload)
            try:
                created = self.order_repo.create(client, request)
            except httpx.HTTPError as exc:
                raise erp_unavailable("creating sales order", exc)
            except (ValidationError, ValueError):
                # The ERP may have stored the order; keep the cart so the
                # operator can check before resubmitting.
                logger.error("Unreadable response from ERP after creating order")
                raise HTTPException(
                    status_code=status.HTTP_502_BAD_GATEWAY,
                    detail="ERP returned an unreadable response for the new order",
                )

            # 6) Cart is done
            total = cart.summary.total
            self.cart_repo.discard(store, user.id)

        logger.info(
            f"Sales order {created.order_code or created.id} submitted by user "
            f"{user.id} ({len(request.details)} lines, total {total})"
        )

        return SalesOrderSubmitted(
            id=created.id,
            order_code=created.order_code,
            customer_id=payload.customer_id,
            payment_method=payload.payment_method,
            total_amount=total,
            paid_amount=request.paid_amount,
            line_count=len(request.details),
        )

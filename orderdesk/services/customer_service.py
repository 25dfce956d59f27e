# orderdesk/services/customer_service.py
from decimal import Decimal

import httpx
from fastapi import HTTPException, status

from orderdesk.core.erp_client import erp_unavailable
from orderdesk.models.cart import ZERO
from orderdesk.repositories.customer_repo import CustomerRepository
from orderdesk.schemas.customer import CustomerCreditRead
from orderdesk.services.credit_service import (
    available_credit,
    debt_status,
    rounded_usage_percent,
)


class CustomerService:
    """
    Credit position of customers, read from the ERP directory.
    """

    def __init__(self, repo: CustomerRepository, warning_percent: Decimal = Decimal("80")):
        self.repo = repo
        self.warning_percent = warning_percent

    def get_credit(self, client: httpx.Client, customer_id: int) -> CustomerCreditRead:
        try:
            customer = self.repo.get_by_id(client, customer_id)
        except httpx.HTTPError as exc:
            raise erp_unavailable("loading customer", exc)

        if customer is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Customer not found",
            )

        return CustomerCreditRead(
            customer_id=customer.id,
            customer_name=customer.customer_name,
            credit_limit=customer.credit_limit or ZERO,
            current_debt=customer.current_debt or ZERO,
            available_credit=available_credit(customer.credit_limit, customer.current_debt),
            usage_percent=rounded_usage_percent(customer),
            debt_status=debt_status(customer, self.warning_percent),
        )

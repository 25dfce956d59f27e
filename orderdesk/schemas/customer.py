# orderdesk/schemas/customer.py
from decimal import Decimal
from typing import Any, Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel

from orderdesk.schemas.common import ErpModel, Money, lenient_decimal, lenient_str

DebtStatus = Literal["safe", "warning", "over_limit"]


class CustomerRef(ErpModel):
    """
    Credit snapshot of a customer as returned by the customer directory.

    creditLimit / currentDebt may be absent or malformed; they read as None
    and the credit check treats None as 0 (no available credit).
    """

    id: int
    customer_code: str | None = None
    customer_name: str | None = None
    credit_limit: Decimal | None = None
    current_debt: Decimal | None = None

    @field_validator("credit_limit", "current_debt", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Decimal | None:
        return lenient_decimal(v)

    @field_validator("customer_code", "customer_name", mode="before")
    @classmethod
    def parse_text(cls, v: Any) -> str | None:
        return lenient_str(v)


class CustomerCreditRead(SQLModel):
    """
    Credit position of a customer, as shown next to the order form.
    """

    model_config = ConfigDict(extra="forbid")

    customer_id: int
    customer_name: str | None = None
    credit_limit: Money
    current_debt: Money
    available_credit: Money
    usage_percent: Money
    debt_status: DebtStatus

# orderdesk/schemas/order.py
from decimal import Decimal
from typing import Any, Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import Field, SQLModel

from orderdesk.schemas.common import MAX_AMOUNT, ErpModel, Money, lenient_str

PaymentMethod = Literal["cash", "bank_transfer", "credit", "cod"]
SalesChannel = Literal["retail", "wholesale", "online", "distributor"]


class OrderCheckout(SQLModel):
    """
    Payload for turning the operator's cart into a sales order.

    Operator provides:
      - customer_id
      - sales_channel (default retail)
      - payment_method
      - paid_amount (prepayment; only meaningful for credit orders)
      - delivery_address, notes, warehouse_id (optional)

    Backend derives:
      - shipping_fee and details from the cart
      - paidAmount sent upstream (cart total unless method is credit)
    """

    model_config = ConfigDict(extra="forbid")

    customer_id: int = Field(gt=0)
    warehouse_id: int | None = Field(default=None, gt=0)
    sales_channel: SalesChannel = "retail"
    delivery_address: str | None = Field(default=None, max_length=255)
    payment_method: PaymentMethod = "cash"
    paid_amount: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_AMOUNT)
    notes: str | None = Field(default=None, max_length=255)

    @field_validator("delivery_address", "notes")
    @classmethod
    def normalize_text(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class SalesOrderDetailCreate(ErpModel):
    product_id: int
    quantity: Money
    unit_price: Money
    discount_percent: Money
    tax_rate: Money


class SalesOrderCreate(ErpModel):
    """
    Creation request sent to the ERP's POST /sales-orders.
    Serialized with camelCase aliases, optional fields omitted when None.
    """

    customer_id: int
    warehouse_id: int | None = None
    sales_channel: SalesChannel
    delivery_address: str | None = None
    shipping_fee: Money
    payment_method: PaymentMethod
    paid_amount: Money
    notes: str | None = None
    details: list[SalesOrderDetailCreate]

    def to_request_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SalesOrderRef(ErpModel):
    """The parts of the ERP's create response we use."""

    id: int
    order_code: str | None = None

    @field_validator("order_code", mode="before")
    @classmethod
    def parse_code(cls, v: Any) -> str | None:
        return lenient_str(v)


class CreditCheckRead(SQLModel):
    """
    Result of the credit-limit check for the current cart.
    `exceeds` is only ever true for payment_method == "credit".
    """

    model_config = ConfigDict(extra="forbid")

    customer_id: int
    payment_method: PaymentMethod
    cart_total: Money
    paid_amount: Money
    debt_amount: Money
    available_credit: Money
    exceeds: bool


class SalesOrderSubmitted(SQLModel):
    """
    Response after the ERP accepted the order.
    """

    model_config = ConfigDict(extra="forbid")

    id: int
    order_code: str | None = None
    customer_id: int
    payment_method: PaymentMethod
    total_amount: Money
    paid_amount: Money
    line_count: int

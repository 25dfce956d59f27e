# orderdesk/schemas/cart.py
from decimal import Decimal

from pydantic import ConfigDict
from sqlmodel import Field, SQLModel

from orderdesk.schemas.common import MAX_AMOUNT, MAX_QUANTITY, Money


class CartLineCreate(SQLModel):
    """
    Payload for adding a product to the cart.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: int = Field(gt=0)
    quantity: Decimal = Field(default=Decimal("1"), gt=0, le=MAX_QUANTITY)


class CartLineUpdate(SQLModel):
    """
    Partial update of one cart line. All fields are optional.

    quantity <= 0 removes the line.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: Decimal | None = Field(default=None, le=MAX_QUANTITY)
    unit_price: Decimal | None = Field(default=None, ge=0, le=MAX_AMOUNT)
    discount_percent: Decimal | None = Field(default=None, ge=0, le=100)
    tax_rate: Decimal | None = Field(default=None, ge=0, le=100)


class ShippingFeeUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    shipping_fee: Decimal = Field(ge=0, le=MAX_AMOUNT)


class CartLineRead(SQLModel):
    """
    Read model for a single cart line, including its computed amounts.
    """

    product_id: int
    product_code: str | None = None
    product_name: str | None = None
    quantity: Money
    unit_price: Money
    discount_percent: Money
    tax_rate: Money
    line_subtotal: Money
    line_discount: Money
    line_tax: Money
    line_total: Money


class CartSummaryRead(SQLModel):
    subtotal: Money
    discount: Money
    tax: Money
    shipping: Money
    total: Money


class CartRead(SQLModel):
    """
    Full cart response model with totals.
    """

    lines: list[CartLineRead]
    summary: CartSummaryRead
    item_count: Money

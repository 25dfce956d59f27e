# orderdesk/schemas/product.py
from decimal import Decimal
from typing import Any

from pydantic import field_validator

from orderdesk.schemas.common import ErpModel, lenient_decimal, lenient_str


class ProductRef(ErpModel):
    """
    What the cart needs from the product catalog.

    Only `id` is required. Prices and rates that are missing or malformed
    upstream come through as None; the cart treats them as 0.
    """

    id: int
    product_code: str | None = None
    product_name: str | None = None
    selling_price_retail: Decimal | None = None
    tax_rate: Decimal | None = None

    @field_validator("selling_price_retail", "tax_rate", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Decimal | None:
        return lenient_decimal(v)

    @field_validator("product_code", "product_name", mode="before")
    @classmethod
    def parse_text(cls, v: Any) -> str | None:
        return lenient_str(v)

# orderdesk/models/cart.py
"""
In-memory order cart used while an operator builds a sales order.

Money is Decimal throughout. Amounts are computed exactly; a summary rounds
each component once (ROUND_HALF_UP, `currency_decimals` places) and derives
the total from the rounded components, so

    total == subtotal - discount + tax + shipping

holds exactly for every summary this module returns.

The cart never raises on mutation. Range checks (percentages in 0..100,
non-negative prices) belong to the caller.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

from orderdesk.schemas.product import ProductRef

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Working precision for summing lines; rounding widens it further if needed.
MONEY_PRECISION = 64


def to_decimal(value: Any) -> Decimal:
    """Convert ints/floats/strings to Decimal without binary float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_money(amount: Decimal, decimals: int) -> Decimal:
    with localcontext() as ctx:
        # quantize fails when the result has more digits than the context allows
        ctx.prec = max(ctx.prec, amount.adjusted() + decimals + 2)
        return amount.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)


@dataclass
class CartLine:
    """
    One product entry in the cart.
    Invariant kept by OrderCart: quantity > 0.
    """

    product_id: int
    quantity: Decimal
    unit_price: Decimal
    discount_percent: Decimal = ZERO
    tax_rate: Decimal = ZERO
    product_code: str | None = None
    product_name: str | None = None

    @property
    def subtotal(self) -> Decimal:
        return self.quantity * self.unit_price

    @property
    def discount(self) -> Decimal:
        # Discount applies to the raw subtotal ...
        return self.subtotal * self.discount_percent / HUNDRED

    @property
    def taxable_amount(self) -> Decimal:
        return self.subtotal - self.discount

    @property
    def tax(self) -> Decimal:
        # ... and tax to what is left after the discount.
        return self.taxable_amount * self.tax_rate / HUNDRED

    @property
    def total(self) -> Decimal:
        return self.taxable_amount + self.tax


@dataclass(frozen=True)
class OrderSummary:
    subtotal: Decimal
    discount: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal


def summarize(
    lines: Iterable[CartLine],
    shipping_fee: Decimal,
    currency_decimals: int = 0,
) -> OrderSummary:
    """
    Aggregate cart lines into an order summary.

      subtotal = Σ quantity * unit_price
      discount = Σ line_subtotal * discount_percent / 100
      tax      = Σ (line_subtotal - line_discount) * tax_rate / 100
      shipping = shipping_fee (flat, once per order)
      total    = subtotal - discount + tax + shipping
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, MONEY_PRECISION)

        subtotal = discount = tax = ZERO
        for line in lines:
            subtotal += line.subtotal
            discount += line.discount
            tax += line.tax

        subtotal = quantize_money(subtotal, currency_decimals)
        discount = quantize_money(discount, currency_decimals)
        tax = quantize_money(tax, currency_decimals)
        shipping = quantize_money(to_decimal(shipping_fee), currency_decimals)

        return OrderSummary(
            subtotal=subtotal,
            discount=discount,
            tax=tax,
            shipping=shipping,
            total=subtotal - discount + tax + shipping,
        )


class OrderCart:
    """
    Ordered collection of CartLine keyed by product_id, plus a flat
    shipping fee. The summary is always derived, never stored.
    """

    def __init__(
        self,
        default_shipping_fee: Decimal | int | str = ZERO,
        currency_decimals: int = 0,
    ):
        self.default_shipping_fee = to_decimal(default_shipping_fee)
        self.currency_decimals = currency_decimals
        self.shipping_fee = self.default_shipping_fee
        # dicts keep insertion order, which is the display order of lines
        self._lines: dict[int, CartLine] = {}

    # ---- read side ----

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    def get_line(self, product_id: int) -> CartLine | None:
        return self._lines.get(product_id)

    def is_empty(self) -> bool:
        return not self._lines

    @property
    def item_count(self) -> Decimal:
        return sum((line.quantity for line in self._lines.values()), ZERO)

    @property
    def summary(self) -> OrderSummary:
        return summarize(self._lines.values(), self.shipping_fee, self.currency_decimals)

    # ---- mutations ----

    def add_line(self, product: ProductRef, quantity: Decimal | int | str = 1) -> CartLine:
        """
        Add `quantity` of `product`.

        An existing line for the same product has its quantity increased;
        otherwise a new line is appended, priced from the product's retail
        price and tax rate (0 when the catalog has none).
        """
        quantity = to_decimal(quantity)
        existing = self._lines.get(product.id)
        if existing is not None:
            existing.quantity += quantity
            return existing

        line = CartLine(
            product_id=product.id,
            quantity=quantity,
            unit_price=product.selling_price_retail or ZERO,
            discount_percent=ZERO,
            tax_rate=product.tax_rate or ZERO,
            product_code=product.product_code,
            product_name=product.product_name,
        )
        self._lines[product.id] = line
        return line

    def remove_line(self, product_id: int) -> None:
        self._lines.pop(product_id, None)

    def update_quantity(self, product_id: int, quantity: Decimal | int | str) -> None:
        quantity = to_decimal(quantity)
        if quantity <= 0:
            self.remove_line(product_id)
            return
        line = self._lines.get(product_id)
        if line is not None:
            line.quantity = quantity

    def update_price(self, product_id: int, unit_price: Decimal | int | str) -> None:
        line = self._lines.get(product_id)
        if line is not None:
            line.unit_price = to_decimal(unit_price)

    def update_discount(self, product_id: int, discount_percent: Decimal | int | str) -> None:
        line = self._lines.get(product_id)
        if line is not None:
            line.discount_percent = to_decimal(discount_percent)

    def update_tax(self, product_id: int, tax_rate: Decimal | int | str) -> None:
        line = self._lines.get(product_id)
        if line is not None:
            line.tax_rate = to_decimal(tax_rate)

    def set_shipping_fee(self, fee: Decimal | int | str) -> None:
        self.shipping_fee = to_decimal(fee)

    def clear(self) -> None:
        """Drop every line and reset shipping to the configured default."""
        self._lines.clear()
        self.shipping_fee = self.default_shipping_fee

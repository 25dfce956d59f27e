# orderdesk/services/credit_service.py
from dataclasses import dataclass
from decimal import Decimal

from orderdesk.models.cart import HUNDRED, ZERO, quantize_money, to_decimal
from orderdesk.schemas.customer import CustomerRef, DebtStatus

CREDIT_METHOD = "credit"


@dataclass(frozen=True)
class CreditDecision:
    debt_amount: Decimal
    available_credit: Decimal
    exceeds: bool


def available_credit(credit_limit: Decimal | None, current_debt: Decimal | None) -> Decimal:
    """max(0, credit_limit - current_debt); absent values count as 0."""
    limit = to_decimal(credit_limit or ZERO)
    debt = to_decimal(current_debt or ZERO)
    return max(ZERO, limit - debt)


def check_credit(
    cart_total: Decimal,
    paid_amount: Decimal,
    payment_method: str,
    credit_limit: Decimal | None,
    current_debt: Decimal | None,
) -> CreditDecision:
    """
    Decide whether a pending order would push the customer over their
    credit limit.

      debt_amount      = cart_total - paid_amount
      available_credit = max(0, credit_limit - current_debt)
      exceeds          = method == "credit" and debt_amount > available_credit

    Only the credit method can exceed; cash, bank_transfer and cod never do.
    """
    debt_amount = to_decimal(cart_total) - to_decimal(paid_amount)
    available = available_credit(credit_limit, current_debt)
    exceeds = payment_method == CREDIT_METHOD and debt_amount > available
    return CreditDecision(
        debt_amount=debt_amount,
        available_credit=available,
        exceeds=exceeds,
    )


def debt_usage_percent(customer: CustomerRef) -> Decimal:
    limit = customer.credit_limit or ZERO
    if limit <= 0:
        return ZERO
    return (customer.current_debt or ZERO) / limit * HUNDRED


def debt_status(customer: CustomerRef, warning_percent: Decimal = Decimal("80")) -> DebtStatus:
    """
    Traffic-light status of a customer's debt:
      over_limit  usage >= 100%
      warning     usage >= warning_percent
      safe        otherwise
    """
    usage = debt_usage_percent(customer)
    if usage >= HUNDRED:
        return "over_limit"
    if usage >= warning_percent:
        return "warning"
    return "safe"


def rounded_usage_percent(customer: CustomerRef) -> Decimal:
    """Usage percent with one decimal place, as displayed."""
    return quantize_money(debt_usage_percent(customer), 1)

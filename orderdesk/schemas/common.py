# orderdesk/schemas/common.py
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any

from pydantic import ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel

# Upper bounds for operator-entered amounts and quantities.
MAX_AMOUNT = Decimal("1e15")
MAX_QUANTITY = Decimal("1e9")

# Money/percent values are Decimal internally and plain JSON numbers on the wire.
Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


class ErpModel(SQLModel):
    """
    Base for shapes exchanged with the ERP backend.

    The backend speaks camelCase JSON; we accept either camelCase or
    snake_case and ignore anything we don't model.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


def lenient_decimal(value: Any) -> Decimal | None:
    """
    Coerce an upstream value into a finite Decimal, or None.

    Used in mode="before" validators so a malformed number from the backend
    reads as "absent" instead of failing the whole payload.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, (int, float, str)):
        try:
            parsed = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
        return parsed if parsed.is_finite() else None
    return None


def lenient_str(value: Any) -> str | None:
    """Keep non-empty strings, drop everything else."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return None


def unwrap_data(body: Any) -> Any:
    """
    ERP responses are usually wrapped as {"success": true, "data": {...}}.
    Return the inner payload when the wrapper is present.
    """
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body

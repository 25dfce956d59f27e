# orderdesk/schemas/user.py
from pydantic import ConfigDict
from sqlmodel import SQLModel


class AuthUserRead(SQLModel):
    """Response schema for the current session."""

    model_config = ConfigDict(extra="forbid")

    id: int
    email: str | None = None
    full_name: str | None = None
    role_key: str | None = None
    warehouse_id: int | None = None
    permissions: list[str]


class GateRead(SQLModel):
    """
    Outcome of evaluating a gate against the current session.
    Clients render their primary content when `allowed`, the fallback otherwise.
    """

    model_config = ConfigDict(extra="forbid")

    allowed: bool

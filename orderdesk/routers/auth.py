# orderdesk/routers/auth.py
from fastapi import APIRouter, Depends, Query

from orderdesk.core.auth import get_permissions, require_auth
from orderdesk.core.permissions import Gate, PermissionSet
from orderdesk.models.user import SessionUser
from orderdesk.schemas.user import AuthUserRead, GateRead

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.get("/me", response_model=AuthUserRead)
def read_me(current_user: SessionUser = Depends(require_auth)):
    """
    Return the current operator as seen by this service.
    """
    perms = current_user.perms
    return AuthUserRead(
        id=current_user.id,
        email=current_user.email,
        full_name=current_user.full_name,
        role_key=perms.role_key,
        warehouse_id=perms.warehouse_id,
        permissions=sorted(perms.permissions),
    )


@router.get("/can", response_model=GateRead)
def evaluate_gate(
    permission: str | None = None,
    any_permissions: list[str] = Query(default=[], alias="any"),
    all_permissions: list[str] = Query(default=[], alias="all"),
    role: str | None = None,
    invert: bool = Query(default=False, alias="not"),
    perms: PermissionSet = Depends(get_permissions),
):
    """
    Evaluate a gate against the current session.

    Query params (first one present wins):
      - permission: single permission key
      - any: repeatable, at least one key
      - all: repeatable, every key
      - role: role key
      - not: invert the result

    Guests get an empty permission set, so only `not` gates can open for them.
    """
    gate = Gate(
        permission=permission,
        any_permissions=tuple(any_permissions),
        all_permissions=tuple(all_permissions),
        role=role,
        invert=invert,
    )
    return GateRead(allowed=gate.allows(perms))

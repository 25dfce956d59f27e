# orderdesk/core/auth.py
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from orderdesk.core.config import get_settings
from orderdesk.core.permissions import PermissionSet
from orderdesk.models.user import SessionUser

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so we can support "guest" mode (unauthenticated).
bearer_scheme = HTTPBearer(auto_error=False)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify an ERP access token (JWT).

    Verification:
      - signature (JWT_SECRET / JWT_ALG)
      - expiration time (exp)
      - audience is NOT verified

    Raises:
        HTTPException(401): if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def _optional_str(claims: dict[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = claims.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def session_user_from_claims(claims: dict[str, Any]) -> SessionUser:
    """
    Build the SessionUser from decoded claims.

    Only `sub` is mandatory. Permissions, role and warehouse are read
    fail-closed: anything missing or malformed grants nothing.

    Raises:
        HTTPException(401): if `sub` is missing or not a numeric id.
    """
    sub = claims.get("sub")
    if sub is None or isinstance(sub, bool):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub",
        )

    # The ERP issues numeric user ids; sub arrives as a string
    try:
        user_id = int(str(sub))
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid sub in token",
        )

    return SessionUser(
        id=user_id,
        email=_optional_str(claims, "email"),
        full_name=_optional_str(claims, "fullName", "full_name"),
        perms=PermissionSet.from_session(claims),
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> SessionUser | None:
    """
    Resolve the current operator from the bearer token.

    Returns:
        SessionUser if a token was sent, else None for guests.

    Raises:
        HTTPException(401): if the token is invalid or lacks a usable sub.
    """
    if credentials is None:
        return None  # guest mode

    claims = decode_access_token(credentials.credentials)
    return session_user_from_claims(claims)


def get_permissions(user: SessionUser | None = Depends(get_current_user)) -> PermissionSet:
    """Permission snapshot for this request; empty for guests."""
    if user is None:
        return PermissionSet()
    return user.perms


def require_auth(user: SessionUser | None = Depends(get_current_user)) -> SessionUser:
    """
    Enforce authentication.

    Raises:
        HTTPException(401): if user is None.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user


def require_permission(*perm_keys: str, any_of: bool = False):
    """
    Factory: returns a dependency that checks permission keys.

    By default every key is required; with any_of=True one is enough.

    Usage:
      user=Depends(require_permission("create_sales_order"))
      user=Depends(require_permission("view_customers", "create_sales_order", any_of=True))
    """

    def dependency(user: SessionUser = Depends(require_auth)) -> SessionUser:
        if any_of:
            allowed = user.perms.has_any_permission(perm_keys)
        else:
            allowed = user.perms.has_all_permissions(perm_keys)

        if not allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing permission: {', '.join(perm_keys)}",
            )
        return user

    return dependency

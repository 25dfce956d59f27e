# orderdesk/core/permissions.py
"""
Permission evaluation for the authenticated operator.

A PermissionSet is an immutable snapshot of what the ERP auth service put in
the operator's access token. One is built per request (see core/auth.py) and
passed explicitly to whatever needs to gate on it; nothing here is global.

These checks drive conditional UI and route convenience only. The ERP backend
re-checks every call it receives, so a false positive here cannot grant
access to data.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

# ERP role keys this service checks
ROLE_ADMIN = "admin"
ROLE_WAREHOUSE_MANAGER = "warehouse_manager"

# Roles that see every warehouse regardless of assignment
ALL_WAREHOUSE_ROLES = frozenset({ROLE_ADMIN, ROLE_WAREHOUSE_MANAGER})


@dataclass(frozen=True)
class PermissionSet:
    """
    Snapshot of a session's permission keys and role.

    An empty snapshot (the default) represents a guest: every query
    answers False.
    """

    permissions: frozenset[str] = field(default_factory=frozenset)
    role_key: str | None = None
    warehouse_id: int | None = None

    @classmethod
    def from_session(cls, session: Mapping[str, Any] | None) -> "PermissionSet":
        """
        Build a snapshot from a session object shaped like
        {"permissions": [...], "role": {"roleKey": "..."}, "warehouseId": 1}.

        Unknown or malformed parts are treated as absent.
        """
        if not isinstance(session, Mapping):
            return cls()

        raw_permissions = session.get("permissions")
        if isinstance(raw_permissions, (list, tuple, set, frozenset)):
            permissions = frozenset(p for p in raw_permissions if isinstance(p, str))
        else:
            permissions = frozenset()

        role_key = None
        role = session.get("role")
        if isinstance(role, Mapping):
            candidate = role.get("roleKey", role.get("role_key"))
            if isinstance(candidate, str) and candidate:
                role_key = candidate

        warehouse_id = session.get("warehouseId")
        if isinstance(warehouse_id, bool) or not isinstance(warehouse_id, int):
            warehouse_id = None

        return cls(permissions=permissions, role_key=role_key, warehouse_id=warehouse_id)

    # ----- Core queries -----

    def has_permission(self, key: str) -> bool:
        return key in self.permissions

    def has_any_permission(self, keys: Iterable[str]) -> bool:
        return any(k in self.permissions for k in keys)

    def has_all_permissions(self, keys: Iterable[str]) -> bool:
        return all(k in self.permissions for k in keys)

    def is_role(self, role_key: str) -> bool:
        return self.role_key is not None and self.role_key == role_key

    def has_warehouse_access(self, warehouse_id: int) -> bool:
        """
        Admins and warehouse managers can access every warehouse;
        everybody else only the warehouse assigned to them.
        """
        if self.role_key in ALL_WAREHOUSE_ROLES:
            return True
        return self.warehouse_id is not None and self.warehouse_id == warehouse_id


@dataclass(frozen=True)
class Gate:
    """
    Declarative access gate.

    Exactly one predicate is evaluated, in this precedence:
      1. permission        (single key)
      2. any_permissions   (at least one key; ignored when empty)
      3. all_permissions   (every key; ignored when empty)
      4. role              (role key equality)

    With no predicate configured the predicate is False. `invert` flips the
    result, so `Gate(permission="admin", invert=True)` opens for everybody
    who is NOT holding "admin".
    """

    permission: str | None = None
    any_permissions: tuple[str, ...] = ()
    all_permissions: tuple[str, ...] = ()
    role: str | None = None
    invert: bool = False

    def allows(self, perms: PermissionSet) -> bool:
        if self.permission:
            granted = perms.has_permission(self.permission)
        elif self.any_permissions:
            granted = perms.has_any_permission(self.any_permissions)
        elif self.all_permissions:
            granted = perms.has_all_permissions(self.all_permissions)
        elif self.role:
            granted = perms.is_role(self.role)
        else:
            granted = False

        return granted != self.invert

    def choose(self, perms: PermissionSet, content: Any, fallback: Any = None) -> Any:
        """Return `content` if the gate opens for `perms`, else `fallback`."""
        return content if self.allows(perms) else fallback

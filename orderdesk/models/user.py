# orderdesk/models/user.py
from dataclasses import dataclass, field

from orderdesk.core.permissions import PermissionSet


@dataclass(frozen=True)
class SessionUser:
    """
    The operator behind the current request.

    Identity:
      - id: the ERP user id (JWT "sub")

    Permissions:
      - an immutable PermissionSet taken from the same token; a new
        login issues a new token and therefore a new snapshot.

    Nothing here is persisted. The ERP owns users, roles and passwords.
    """

    id: int
    email: str | None = None
    full_name: str | None = None
    perms: PermissionSet = field(default_factory=PermissionSet)

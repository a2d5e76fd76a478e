"""
Role capability sets.

Each role maps to a fixed set of permissions. The server-side policy and the
client-side table renderers both consult ROLE_PERMISSIONS; the client check
only decides what to show, the server check decides what happens.
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional

from app.schemas.schemas import UserRole


class Permission(str, Enum):
    view_users = "users.read"
    view_companies = "companies.read"
    edit_own_profile = "users.write_self"
    edit_users = "users.write"
    verify_users = "users.verify"
    assign_roles = "users.assign_role"
    assign_placement = "users.assign_company"
    delete_users = "users.delete"
    manage_companies = "companies.write"


_BASE = frozenset({
    Permission.view_users,
    Permission.view_companies,
    Permission.edit_own_profile,
})

_COORDINATOR = _BASE | {
    Permission.edit_users,
    Permission.verify_users,
    Permission.assign_placement,
    Permission.delete_users,
    Permission.manage_companies,
}

ROLE_PERMISSIONS: Dict[UserRole, FrozenSet[Permission]] = {
    UserRole.student: _BASE,
    UserRole.placement_coordinator: frozenset(_COORDINATOR),
    UserRole.admin: frozenset(_COORDINATOR | {Permission.assign_roles}),
}


def parse_role(value) -> Optional[UserRole]:
    """Return the UserRole for a raw value, or None if it is not a known role."""
    if isinstance(value, UserRole):
        return value
    if not isinstance(value, str):
        return None
    try:
        return UserRole(value)
    except ValueError:
        return None


def permissions_for(role) -> FrozenSet[Permission]:
    """Capability set of a role; unknown roles get nothing."""
    parsed = parse_role(role)
    if parsed is None:
        return frozenset()
    return ROLE_PERMISSIONS[parsed]


def has_permission(role, permission: Permission) -> bool:
    return permission in permissions_for(role)

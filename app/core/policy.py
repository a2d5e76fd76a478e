"""
Authorization policy for user mutations.

authorize() is the single place that decides whether a caller may apply an
action to a target user. Every user-mutating route calls it before touching
the database. Rules run in order and the first failing rule wins:

1. target id must be a valid ObjectId          -> InvalidIdentifier
2. caller's role must grant the permission     -> PermissionDenied
3. role / verification / delete on yourself    -> SelfActionForbidden
4. role assignment must name a known role      -> InvalidRole
5. verification value must be a real boolean   -> InvalidVerificationValue

Denials map to HTTP 400 in the handlers; the API does not distinguish
"forbidden" from "bad request".
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from bson import ObjectId

from app.core.permissions import Permission, has_permission, parse_role
from app.utils.validators import is_valid_object_id


class Action(str, Enum):
    update = "update"
    verify = "verify"
    set_role = "set_role"
    assign_company = "assign_company"
    delete = "delete"


class DenyReason(str, Enum):
    invalid_identifier = "InvalidIdentifier"
    permission_denied = "PermissionDenied"
    self_action_forbidden = "SelfActionForbidden"
    invalid_role = "InvalidRole"
    invalid_verification_value = "InvalidVerificationValue"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[DenyReason] = None
    message: Optional[str] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason, message: str) -> "Decision":
        return cls(allowed=False, reason=reason, message=message)


REQUIRED_PERMISSION = {
    Action.update: Permission.edit_users,
    Action.verify: Permission.verify_users,
    Action.set_role: Permission.assign_roles,
    Action.assign_company: Permission.assign_placement,
    Action.delete: Permission.delete_users,
}

# Actions a user may never apply to their own account
SELF_FORBIDDEN = {
    Action.verify: "You cannot verify your own account",
    Action.set_role: "You cannot change your own role",
    Action.delete: "You cannot delete your own account",
}

PERMISSION_MESSAGES = {
    Action.update: "You are not allowed to update other users",
    Action.verify: "You are not allowed to change verification status",
    Action.set_role: "You are not allowed to change user roles",
    Action.assign_company: "You are not allowed to change placement details",
    Action.delete: "You are not allowed to delete users",
}


def _same_user(target_id, caller_id) -> bool:
    # hex ids are case-insensitive; compare the parsed ObjectIds
    if not is_valid_object_id(caller_id):
        return False
    return ObjectId(target_id) == ObjectId(caller_id)


def _is_permitted(caller: dict, action: Action, is_self: bool) -> bool:
    role = caller.get("role")
    if has_permission(role, REQUIRED_PERMISSION[action]):
        return True
    return action == Action.update and is_self and has_permission(role, Permission.edit_own_profile)


def authorize(caller: dict, action: Action, target_id, value=None) -> Decision:
    """
    Decide whether `caller` may apply `action` to the user `target_id`.

    Args:
        caller: authenticated user dict (needs "id" and "role")
        action: the attempted mutation
        target_id: raw path identifier of the target user
        value: requested role for set_role, requested flag for verify
    """
    if not is_valid_object_id(target_id):
        return Decision.deny(DenyReason.invalid_identifier, "Invalid user ID")

    is_self = _same_user(target_id, caller.get("id"))

    if not _is_permitted(caller, action, is_self):
        return Decision.deny(DenyReason.permission_denied, PERMISSION_MESSAGES[action])

    if is_self and action in SELF_FORBIDDEN:
        return Decision.deny(DenyReason.self_action_forbidden, SELF_FORBIDDEN[action])

    if action == Action.set_role and parse_role(value) is None:
        return Decision.deny(DenyReason.invalid_role, "Invalid role")

    # bool only: 0/1 and "true" are rejected
    if action == Action.verify and not isinstance(value, bool):
        return Decision.deny(DenyReason.invalid_verification_value, "Invalid verification status")

    return Decision.allow()

"""Authorization policy: rule order, self-action, enum and boolean checks."""

import pytest
from bson import ObjectId

from app.core.policy import Action, DenyReason, authorize

ADMIN = {"id": str(ObjectId()), "role": "admin"}
COORDINATOR = {"id": str(ObjectId()), "role": "placementCoordinator"}
STUDENT = {"id": str(ObjectId()), "role": "student"}
TARGET = str(ObjectId())


@pytest.mark.parametrize("target_id", ["", "123", "not-an-object-id", "zzzzzzzzzzzzzzzzzzzzzzzz", None, 42])
@pytest.mark.parametrize("action", list(Action))
def test_malformed_identifier_denied_first(action, target_id):
    decision = authorize(ADMIN, action, target_id, "student")
    assert not decision.allowed
    assert decision.reason == DenyReason.invalid_identifier
    assert decision.message == "Invalid user ID"


@pytest.mark.parametrize("action,value,message", [
    (Action.verify, True, "You cannot verify your own account"),
    (Action.set_role, "student", "You cannot change your own role"),
    (Action.delete, None, "You cannot delete your own account"),
])
def test_self_action_forbidden(action, value, message):
    decision = authorize(ADMIN, action, ADMIN["id"], value)
    assert decision.reason == DenyReason.self_action_forbidden
    assert decision.message == message


@pytest.mark.parametrize("action,value", [
    (Action.verify, False),
    (Action.set_role, "student"),
    (Action.delete, None),
])
def test_self_action_ignores_identifier_case(action, value):
    decision = authorize(ADMIN, action, ADMIN["id"].upper(), value)
    assert decision.reason == DenyReason.self_action_forbidden


def test_student_updates_own_profile_with_uppercase_id():
    assert authorize(STUDENT, Action.update, STUDENT["id"].upper()).allowed


def test_self_action_checked_before_value():
    # invalid role on yourself still reports the self-action
    decision = authorize(ADMIN, Action.set_role, ADMIN["id"], "superuser")
    assert decision.reason == DenyReason.self_action_forbidden


@pytest.mark.parametrize("role", ["superuser", "Admin", "", None, 1, ["admin"]])
def test_invalid_role_denied(role):
    decision = authorize(ADMIN, Action.set_role, TARGET, role)
    assert decision.reason == DenyReason.invalid_role
    assert decision.message == "Invalid role"


@pytest.mark.parametrize("role", ["student", "placementCoordinator", "admin"])
def test_valid_role_allowed(role):
    assert authorize(ADMIN, Action.set_role, TARGET, role).allowed


@pytest.mark.parametrize("value", ["true", 1, 0, None, "false"])
def test_non_boolean_verification_denied(value):
    decision = authorize(COORDINATOR, Action.verify, TARGET, value)
    assert decision.reason == DenyReason.invalid_verification_value


@pytest.mark.parametrize("value", [True, False])
def test_boolean_verification_allowed(value):
    assert authorize(COORDINATOR, Action.verify, TARGET, value).allowed


def test_coordinator_cannot_assign_roles():
    decision = authorize(COORDINATOR, Action.set_role, TARGET, "admin")
    assert decision.reason == DenyReason.permission_denied


@pytest.mark.parametrize("action,value", [
    (Action.verify, True),
    (Action.set_role, "admin"),
    (Action.assign_company, None),
    (Action.delete, None),
    (Action.update, None),
])
def test_student_denied_on_other_users(action, value):
    decision = authorize(STUDENT, action, TARGET, value)
    assert decision.reason == DenyReason.permission_denied


def test_student_may_update_own_profile():
    assert authorize(STUDENT, Action.update, STUDENT["id"]).allowed


def test_student_cannot_verify_self_reports_permission():
    decision = authorize(STUDENT, Action.verify, STUDENT["id"], True)
    assert decision.reason == DenyReason.permission_denied


def test_coordinator_may_reassign_own_placement():
    assert authorize(COORDINATOR, Action.assign_company, COORDINATOR["id"]).allowed


def test_unknown_caller_role_denied():
    caller = {"id": str(ObjectId()), "role": "guest"}
    assert authorize(caller, Action.delete, TARGET).reason == DenyReason.permission_denied

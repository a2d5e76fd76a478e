"""
User Routes

GET /users - List all users
GET /users/{id} - Get a single user
PUT /users/{id} - Update user details
PATCH /users/{id}/verify - Set verification status (coordinator/admin)
PATCH /users/{id}/role - Change role (admin)
PATCH /users/{id}/company - Reassign placement company (coordinator/admin)
DELETE /users/{id} - Delete user (coordinator/admin)

Every mutation runs app.core.policy.authorize() first; a denial is a 400
carrying the policy's message.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from pymongo.errors import DuplicateKeyError
import structlog

from app.core.auth import get_current_user
from app.core.policy import Action, authorize
from app.services.mongo_service import CompanyService, UserService, NOT_PLACED
from app.utils.validators import is_valid_object_id, validate_payload
from app.schemas.schemas import (
    UserUpdate, VerifyRequest, RoleRequest, CompanyAssignRequest, MessageResponse
)

router = APIRouter(prefix="/users", tags=["Users"])
logger = structlog.get_logger()

INTERNAL_ERROR = "Internal server error"


def _enforce(user: dict, action: Action, user_id: str, value=None) -> None:
    """Raise 400 with the policy's message if the caller may not act."""
    decision = authorize(user, action, user_id, value)
    if not decision.allowed:
        logger.info(
            "user.mutation_denied",
            caller_id=user["id"], target_id=user_id,
            action=action.value, reason=decision.reason.value
        )
        raise HTTPException(status_code=400, detail=decision.message)


@router.get("")
async def view_all_users(user: dict = Depends(get_current_user)):
    """List all users (password hashes stripped), sorted by roll number."""
    try:
        users = UserService().find_all()
        if not users:
            raise HTTPException(status_code=404, detail="No users found")
        logger.info("users.viewed", caller_id=user["id"], count=len(users))
        return {"users": users}
    except HTTPException:
        raise
    except Exception:
        logger.exception("users.view_failed")
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)


@router.get("/{user_id}")
async def view_single_user(user_id: str, user: dict = Depends(get_current_user)):
    """Get one user (password hash stripped)."""
    if not is_valid_object_id(user_id):
        raise HTTPException(status_code=400, detail="Invalid user ID")
    try:
        found = UserService().get_by_id(user_id)
        if not found:
            raise HTTPException(status_code=404, detail="User not found")
        logger.info("user.viewed", user_id=user_id, name=found.get("name"))
        return {"user": found}
    except HTTPException:
        raise
    except Exception:
        logger.exception("user.view_failed", user_id=user_id)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    payload: Optional[dict] = Body(None),
    user: dict = Depends(get_current_user)
):
    """
    Update a user's profile and academic fields.

    Students may update only themselves; coordinators and admins anyone.
    role and is_verified are rejected here (see /verify and /role).
    """
    if not is_valid_object_id(user_id):
        raise HTTPException(status_code=400, detail="Invalid user ID")

    data, errors = validate_payload(UserUpdate, payload if payload is not None else {})
    if errors:
        raise HTTPException(status_code=400, detail=errors)

    _enforce(user, Action.update, user_id)

    fields = data.model_dump(exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    try:
        updated = UserService().update(user_id, fields)
        if not updated:
            raise HTTPException(status_code=404, detail="User not found")
        logger.info("user.updated", user_id=user_id, name=updated.get("name"), fields=sorted(fields))
        return updated
    except HTTPException:
        raise
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="Email already registered")
    except Exception:
        logger.exception("user.update_failed", user_id=user_id)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)


@router.patch("/{user_id}/verify", response_model=MessageResponse)
async def verify_user(
    user_id: str,
    payload: Optional[dict] = Body(None),
    user: dict = Depends(get_current_user)
):
    """Set a user's verification flag. Body: {"is_verified": true|false}."""
    if not is_valid_object_id(user_id):
        raise HTTPException(status_code=400, detail="Invalid user ID")

    data, errors = validate_payload(VerifyRequest, payload if payload is not None else {})
    if errors:
        raise HTTPException(status_code=400, detail=errors)

    _enforce(user, Action.verify, user_id, data.is_verified)

    try:
        updated = UserService().set_verified(user_id, data.is_verified)
        if not updated:
            raise HTTPException(status_code=404, detail="User not found")
        logger.info("user.verified", user_id=user_id, name=updated["name"], is_verified=data.is_verified)
        return MessageResponse(message=f"Verification status of {updated['name']} updated Successfully")
    except HTTPException:
        raise
    except Exception:
        logger.exception("user.verify_failed", user_id=user_id)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)


@router.patch("/{user_id}/role", response_model=MessageResponse)
async def update_role(
    user_id: str,
    payload: Optional[dict] = Body(None),
    user: dict = Depends(get_current_user)
):
    """Change a user's role. Body: {"role": "student"|"placementCoordinator"|"admin"}."""
    if not is_valid_object_id(user_id):
        raise HTTPException(status_code=400, detail="Invalid user ID")

    data, errors = validate_payload(RoleRequest, payload if payload is not None else {})
    if errors:
        raise HTTPException(status_code=400, detail=errors)

    _enforce(user, Action.set_role, user_id, data.role)

    try:
        updated = UserService().set_role(user_id, data.role)
        if not updated:
            raise HTTPException(status_code=404, detail="User not found")
        logger.info("user.role_updated", user_id=user_id, name=updated["name"], role=data.role)
        return MessageResponse(message=f"Role of {updated['name']} updated Successfully")
    except HTTPException:
        raise
    except Exception:
        logger.exception("user.role_update_failed", user_id=user_id)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)


@router.patch("/{user_id}/company", response_model=MessageResponse)
async def update_company(
    user_id: str,
    payload: Optional[dict] = Body(None),
    user: dict = Depends(get_current_user)
):
    """
    Reassign the company a student is placed at.
    Body: {"company_id": "<id>"}, or {"company_id": "np"} for not placed.
    """
    if not is_valid_object_id(user_id):
        raise HTTPException(status_code=400, detail="Invalid user ID")

    data, errors = validate_payload(CompanyAssignRequest, payload if payload is not None else {})
    if errors:
        raise HTTPException(status_code=400, detail=errors)

    _enforce(user, Action.assign_company, user_id)

    company_id = data.company_id
    if company_id != NOT_PLACED and not is_valid_object_id(company_id):
        raise HTTPException(status_code=400, detail="Invalid company ID")

    try:
        company = None
        if company_id != NOT_PLACED:
            company = CompanyService().get_by_id(company_id)
            if not company:
                raise HTTPException(status_code=404, detail="Company not found")

        updated = UserService().set_placement(user_id, company)
        if not updated:
            raise HTTPException(status_code=404, detail="User not found")
        logger.info(
            "user.placement_updated", user_id=user_id, name=updated["name"],
            company_id=company_id, company_name=company["name"] if company else None
        )
        return MessageResponse(message=f"Placement of {updated['name']} updated Successfully")
    except HTTPException:
        raise
    except Exception:
        logger.exception("user.placement_update_failed", user_id=user_id)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: str, user: dict = Depends(get_current_user)):
    """Delete a user account. Nobody can delete their own account."""
    _enforce(user, Action.delete, user_id)

    try:
        deleted = UserService().delete(user_id)
        if not deleted:
            raise HTTPException(status_code=404, detail="User not found")
        logger.info("user.deleted", user_id=user_id, name=deleted["name"])
        return MessageResponse(message=f"Student {deleted['name']} deleted Successfully")
    except HTTPException:
        raise
    except Exception:
        logger.exception("user.delete_failed", user_id=user_id)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

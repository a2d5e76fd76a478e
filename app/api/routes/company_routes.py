"""
Company Routes

GET /companies - List companies
GET /companies/{id} - Get one company
POST /companies - Add company (coordinator/admin)
PUT /companies/{id} - Update company (coordinator/admin)
DELETE /companies/{id} - Delete company (coordinator/admin)
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException
import structlog

from app.core.auth import get_current_user
from app.core.permissions import Permission, has_permission
from app.services.mongo_service import CompanyService
from app.utils.validators import is_valid_object_id, validate_payload
from app.schemas.schemas import CompanyCreate, CompanyUpdate, MessageResponse

router = APIRouter(prefix="/companies", tags=["Companies"])
logger = structlog.get_logger()

INTERNAL_ERROR = "Internal server error"

# sub-documents merged key by key on update instead of replaced
NESTED_FIELDS = ("ctc_breakup", "cutoffs")


def _flatten(prefix: str, value, out: dict) -> None:
    """{"ug": {"cgpa": 7}} under "cutoffs" -> {"cutoffs.ug.cgpa": 7}"""
    if isinstance(value, dict):
        for key, inner in value.items():
            _flatten(f"{prefix}.{key}", inner, out)
    else:
        out[prefix] = value


def _require_manage(user: dict) -> None:
    """Company writes need MANAGE_COMPANIES; a denial is a 400 like user mutations."""
    if not has_permission(user.get("role"), Permission.manage_companies):
        logger.info("company.mutation_denied", caller_id=user["id"], role=user.get("role"))
        raise HTTPException(status_code=400, detail="You are not allowed to manage companies")


@router.get("")
async def view_all_companies(user: dict = Depends(get_current_user)):
    """List all companies, sorted by name."""
    try:
        return CompanyService().find_all()
    except Exception:
        logger.exception("companies.view_failed")
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)


@router.get("/{company_id}")
async def view_single_company(company_id: str, user: dict = Depends(get_current_user)):
    if not is_valid_object_id(company_id):
        raise HTTPException(status_code=400, detail="Invalid company ID")
    try:
        company = CompanyService().get_by_id(company_id)
        if not company:
            raise HTTPException(status_code=404, detail="Company not found")
        return company
    except HTTPException:
        raise
    except Exception:
        logger.exception("company.view_failed", company_id=company_id)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)


@router.post("", status_code=201)
async def add_company(payload: Optional[dict] = Body(None), user: dict = Depends(get_current_user)):
    """Add a company. ctc_breakup.base may not exceed ctc."""
    data, errors = validate_payload(CompanyCreate, payload if payload is not None else {})
    if errors:
        raise HTTPException(status_code=400, detail=errors)

    _require_manage(user)

    try:
        company = CompanyService().insert(data.model_dump())
        logger.info("company.added", company_id=company["_id"], name=company["name"])
        return company
    except Exception:
        logger.exception("company.add_failed")
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)


@router.put("/{company_id}")
async def update_company(
    company_id: str,
    payload: Optional[dict] = Body(None),
    user: dict = Depends(get_current_user)
):
    """Partial update. The stored ctc/base pair must stay consistent after the change."""
    if not is_valid_object_id(company_id):
        raise HTTPException(status_code=400, detail="Invalid company ID")

    data, errors = validate_payload(CompanyUpdate, payload if payload is not None else {})
    if errors:
        raise HTTPException(status_code=400, detail=errors)

    _require_manage(user)

    fields = {}
    for key, value in data.model_dump(exclude_unset=True).items():
        if key in NESTED_FIELDS:
            _flatten(key, value, fields)
        else:
            fields[key] = value
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")

    try:
        companies = CompanyService()
        if "ctc" in fields or "ctc_breakup.base" in fields:
            current = companies.get_by_id(company_id)
            if not current:
                raise HTTPException(status_code=404, detail="Company not found")
            ctc = fields.get("ctc", current.get("ctc"))
            base = fields.get("ctc_breakup.base", (current.get("ctc_breakup") or {}).get("base"))
            if ctc is not None and base is not None and base > ctc:
                raise HTTPException(status_code=400, detail=["ctc_breakup.base: cannot exceed ctc"])

        updated = companies.update(company_id, fields)
        if not updated:
            raise HTTPException(status_code=404, detail="Company not found")
        logger.info("company.updated", company_id=company_id, name=updated["name"], fields=sorted(fields))
        return updated
    except HTTPException:
        raise
    except Exception:
        logger.exception("company.update_failed", company_id=company_id)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)


@router.delete("/{company_id}", response_model=MessageResponse)
async def delete_company(company_id: str, user: dict = Depends(get_current_user)):
    if not is_valid_object_id(company_id):
        raise HTTPException(status_code=400, detail="Invalid company ID")

    _require_manage(user)

    try:
        deleted = CompanyService().delete(company_id)
        if not deleted:
            raise HTTPException(status_code=404, detail="Company not found")
        logger.info("company.deleted", company_id=company_id, name=deleted["name"])
        return MessageResponse(message=f"Company {deleted['name']} deleted successfully")
    except HTTPException:
        raise
    except Exception:
        logger.exception("company.delete_failed", company_id=company_id)
        raise HTTPException(status_code=500, detail=INTERNAL_ERROR)

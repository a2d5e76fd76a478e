"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from typing import Any, Optional, List
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    placement_coordinator = "placementCoordinator"
    admin = "admin"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8)
    roll_no: str = Field(..., min_length=1, max_length=20)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: str


# ============================================================
# SHARED ACADEMIC / COMPENSATION SHAPES
# ============================================================

class Grade(BaseModel):
    cgpa: Optional[float] = Field(None, ge=0, le=10)
    percentage: Optional[float] = Field(None, ge=0, le=100)


class PlacedAt(BaseModel):
    company_id: Optional[str] = None
    company_name: Optional[str] = None
    ctc: Optional[float] = None
    ctc_base: Optional[float] = None
    location: Optional[str] = None


# ============================================================
# USER SCHEMAS
# ============================================================

class UserUpdate(BaseModel):
    """
    Fields a user record may be edited with through PUT /users/{id}.

    role and is_verified are not accepted here; they have dedicated,
    policy-checked endpoints.
    """
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    roll_no: Optional[str] = Field(None, min_length=1, max_length=20)
    pg: Optional[Grade] = None
    ug: Optional[Grade] = None
    hsc: Optional[Grade] = None
    ssc: Optional[Grade] = None
    total_gap_in_academics: Optional[int] = Field(None, ge=0)
    backlogs: Optional[int] = Field(None, ge=0)

class VerifyRequest(BaseModel):
    is_verified: Any = None

class RoleRequest(BaseModel):
    role: Any = None

class CompanyAssignRequest(BaseModel):
    company_id: str = Field(..., min_length=1)

class UserResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: str
    email: str
    roll_no: Optional[str] = None
    role: UserRole
    is_verified: bool = False
    placed_at: PlacedAt = PlacedAt()
    pg: Optional[Grade] = None
    ug: Optional[Grade] = None
    hsc: Optional[Grade] = None
    ssc: Optional[Grade] = None
    total_gap_in_academics: Optional[int] = None
    backlogs: Optional[int] = None


# ============================================================
# COMPANY SCHEMAS
# ============================================================

class CtcBreakup(BaseModel):
    base: float = Field(0, ge=0)
    other: Optional[float] = Field(None, ge=0)

class Cutoffs(BaseModel):
    pg: Grade = Grade()
    ug: Grade = Grade()
    twelfth: Grade = Grade()
    tenth: Grade = Grade()

class CompanyCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=2, max_length=200)
    status: Optional[str] = None
    type_of_offer: Optional[str] = None
    profile: Optional[str] = None
    profile_category: Optional[str] = None
    interview_shortlist: int = Field(0, ge=0)
    date_of_offer: Optional[datetime] = None
    locations: List[str] = []
    ctc: float = Field(..., ge=0)
    ctc_breakup: CtcBreakup = CtcBreakup()
    cutoffs: Cutoffs = Cutoffs()
    bond: Optional[str] = None
    selected_students_roll_no: List[str] = []

    @model_validator(mode="after")
    def base_within_ctc(self):
        if self.ctc_breakup.base > self.ctc:
            raise ValueError("ctc_breakup.base cannot exceed ctc")
        return self

class CompanyUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=2, max_length=200)
    status: Optional[str] = None
    type_of_offer: Optional[str] = None
    profile: Optional[str] = None
    profile_category: Optional[str] = None
    interview_shortlist: Optional[int] = Field(None, ge=0)
    date_of_offer: Optional[datetime] = None
    locations: Optional[List[str]] = None
    ctc: Optional[float] = Field(None, ge=0)
    ctc_breakup: Optional[CtcBreakup] = None
    cutoffs: Optional[Cutoffs] = None
    bond: Optional[str] = None
    selected_students_roll_no: Optional[List[str]] = None

    # may be omitted, but not cleared
    @field_validator("name", "ctc", "ctc_breakup", "cutoffs")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("cannot be null")
        return value


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

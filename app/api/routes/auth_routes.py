"""
Authentication Routes

POST /auth/register - Register new student account
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
"""

from fastapi import APIRouter, HTTPException, Depends
from pymongo.errors import DuplicateKeyError
import structlog

from app.core.auth import hash_password, verify_password, create_access_token, get_current_user
from app.services.mongo_service import UserService
from app.schemas.schemas import (
    RegisterRequest, LoginRequest, TokenResponse, UserResponse, MessageResponse
)

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = structlog.get_logger()


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(request: RegisterRequest):
    """
    Register a new account.

    New accounts are unverified students; an admin or placement
    coordinator verifies them and may promote them later.
    """
    users = UserService()
    if users.get_by_email(request.email):
        raise HTTPException(status_code=400, detail="Email already registered")

    try:
        user_id = users.insert(
            name=request.name,
            email=request.email,
            password_hash=hash_password(request.password),
            roll_no=request.roll_no,
        )
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="Email already registered")

    logger.info("user.registered", user_id=user_id, name=request.name)
    return MessageResponse(message="Registered successfully. Please login.")


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = UserService().get_by_email(request.email)

    if not user or not verify_password(request.password, user["password_hash"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_access_token(data={"sub": user["_id"], "role": user["role"]})

    return TokenResponse(access_token=token, user_id=user["_id"], role=user["role"])


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    doc = UserService().get_by_id(user["id"])
    if not doc:
        raise HTTPException(status_code=404, detail="User not found")
    return doc

# ---------- routes/auth_routes.py ----------
"""
Auth routes — register, login and profile for the signed-in user.
The bearer token issued here is what every other router resolves the
current user from.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from auth import hash_password, verify_password, create_token, get_current_user
from database import get_db
from errors import FinanceError, http_status_for
from services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])


# ── Pydantic schemas ──────────────────────────────────────────────
class RegisterRequest(BaseModel):
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=8)


class LoginRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    email: Optional[str] = Field(default=None, min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")


def serialize_user(user) -> dict:
    return {
        "id": user.id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "full_name": user.full_name,
        "email": user.email,
        "created_at": user.created_at.isoformat() if user.created_at else None,
    }


def _token_response(user) -> dict:
    token = create_token({"user_id": user.id, "email": user.email})
    return {"status": "success", "data": {"token": token, "user": serialize_user(user)}}


# ── Routes ────────────────────────────────────────────────────────
@router.post("/register", status_code=201)
async def register(body: RegisterRequest, db: Session = Depends(get_db)):
    """Create a user and sign them in."""
    try:
        user = UserService.create_user(db, {
            "first_name": body.first_name,
            "last_name": body.last_name,
            "email": body.email,
            "hashed_password": hash_password(body.password),
        })
        logger.info(f"Registered user {user.id}")
        return _token_response(user)
    except FinanceError as e:
        raise HTTPException(status_code=http_status_for(e), detail=e.message)


@router.post("/login")
async def login(body: LoginRequest, db: Session = Depends(get_db)):
    """Authenticate with email + password."""
    user = UserService.find_by_email(db, body.email)
    if not user or not verify_password(body.password, user.hashed_password):
        logger.info(f"Failed login for {body.email}")
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return _token_response(user)


@router.get("/me")
async def me(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    user = UserService.find_by_id(db, user_id)
    return serialize_user(user)


@router.patch("/me")
async def update_me(body: ProfileUpdate, user_id: int = Depends(get_current_user),
                    db: Session = Depends(get_db)):
    try:
        user = UserService.update_user(db, user_id, body.model_dump(exclude_unset=True))
        return {"status": "success", "data": serialize_user(user)}
    except FinanceError as e:
        raise HTTPException(status_code=http_status_for(e), detail=e.message)

"""Account registration and login."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gymtracker.db.session import get_db
from gymtracker.schemas.user import AuthResponse, UserLogin, UserPublic, UserRegister
from gymtracker.services.identity import authenticate_user, issue_token, register_user

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(payload: UserRegister, db: AsyncSession = Depends(get_db)):
    user = await register_user(db, payload)
    return AuthResponse(
        message="Registration successful",
        token=issue_token(user),
        user=UserPublic.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(payload: UserLogin, db: AsyncSession = Depends(get_db)):
    """``username`` may be the username or the email address."""
    user = await authenticate_user(db, payload.username, payload.password)
    return AuthResponse(
        message="Login successful",
        token=issue_token(user),
        user=UserPublic.model_validate(user),
    )

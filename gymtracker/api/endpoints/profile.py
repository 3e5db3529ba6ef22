"""Profile of the authenticated user."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from gymtracker.api.deps import get_current_user
from gymtracker.core.errors import NotFound
from gymtracker.db.session import get_db
from gymtracker.models.user import User
from gymtracker.schemas.user import CurrentUser, ProfileRead, ProfileUpdate

router = APIRouter()


async def _load_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


@router.get("", response_model=ProfileRead)
async def get_profile(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await _load_user(db, current_user.id)


@router.put("", response_model=ProfileRead)
async def update_profile(
    payload: ProfileUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Partial update; only fields present in the body change."""
    user = await _load_user(db, current_user.id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(user, key, value)
    await db.flush()
    await db.refresh(user)
    return user

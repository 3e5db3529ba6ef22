"""Set logging endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from gymtracker.core.config import Settings, get_settings
from gymtracker.db.session import get_session_factory
from gymtracker.schemas.workout import SetCreate, SetLogged
from gymtracker.services.ledger import log_set

router = APIRouter()


@router.post("", response_model=SetLogged)
async def create_set(
    payload: SetCreate,
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    settings: Settings = Depends(get_settings),
):
    """
    Log a set against the user's open workout for today, opening one if needed.
    Set number and personal-record flag are assigned in the same transaction.
    """
    return await log_set(session_factory, payload, settings)

"""Equipment endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gymtracker.db.session import get_db
from gymtracker.models.equipment import Equipment
from gymtracker.schemas.equipment import EquipmentRead

router = APIRouter()


@router.get("", response_model=list[EquipmentRead])
async def list_equipment(db: AsyncSession = Depends(get_db)):
    """All equipment, ordered by name."""
    result = await db.execute(select(Equipment).order_by(Equipment.name))
    return list(result.scalars().all())

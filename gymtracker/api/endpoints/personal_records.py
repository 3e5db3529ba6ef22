"""Personal records listing."""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gymtracker.db.session import get_db
from gymtracker.models.exercise import Category, Exercise
from gymtracker.models.personal_record import PersonalRecord
from gymtracker.schemas.personal_record import PersonalRecordRead

router = APIRouter()


@router.get("/{user_id}", response_model=list[PersonalRecordRead])
async def list_personal_records(user_id: int, db: AsyncSession = Depends(get_db)):
    """Every PR the user has set, newest first. Older rows stay as history."""
    result = await db.execute(
        select(
            PersonalRecord.id.label("pr_id"),
            PersonalRecord.value,
            PersonalRecord.date_achieved,
            PersonalRecord.type,
            PersonalRecord.exercise_id,
            Exercise.name.label("exercise_name"),
            Category.name.label("category"),
        )
        .join(Exercise, Exercise.id == PersonalRecord.exercise_id)
        .join(Category, Category.id == Exercise.category_id)
        .where(PersonalRecord.user_id == user_id)
        .order_by(PersonalRecord.date_achieved.desc(), PersonalRecord.id.desc())
    )
    return [PersonalRecordRead.model_validate(row._asdict()) for row in result.all()]

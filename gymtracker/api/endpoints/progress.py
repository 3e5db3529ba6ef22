"""Body weight / body fat progress and PR progression per exercise."""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gymtracker.api.deps import get_current_user, require_same_user
from gymtracker.core.clock import utc_today
from gymtracker.core.enums import PRType
from gymtracker.core.errors import NotFound
from gymtracker.db.session import get_db
from gymtracker.models.exercise import Exercise
from gymtracker.models.personal_record import PersonalRecord
from gymtracker.models.progress import ProgressEntry
from gymtracker.models.user import User
from gymtracker.schemas.progress import (
    BodyFatPoint,
    PRPoint,
    ProgressEntryCreate,
    ProgressEntryCreated,
    ProgressRead,
    WeightPoint,
)
from gymtracker.schemas.user import CurrentUser

router = APIRouter()


@router.get("/{user_id}", response_model=ProgressRead)
async def get_progress(user_id: int, db: AsyncSession = Depends(get_db)):
    """Weight and body-fat series plus PR values grouped by exercise name, all oldest first."""
    entries = await db.execute(
        select(ProgressEntry)
        .where(ProgressEntry.user_id == user_id)
        .order_by(ProgressEntry.date, ProgressEntry.id)
    )
    weight_data: list[WeightPoint] = []
    body_fat_data: list[BodyFatPoint] = []
    for e in entries.scalars().all():
        if e.weight is not None:
            weight_data.append(WeightPoint(date=e.date, weight=e.weight))
        if e.body_fat_percentage is not None:
            body_fat_data.append(BodyFatPoint(date=e.date, body_fat_percentage=e.body_fat_percentage))

    prs = await db.execute(
        select(Exercise.name, PersonalRecord.date_achieved, PersonalRecord.value)
        .join(Exercise, Exercise.id == PersonalRecord.exercise_id)
        .where(PersonalRecord.user_id == user_id, PersonalRecord.type == PRType.WEIGHT.value)
        .order_by(PersonalRecord.date_achieved, PersonalRecord.id)
    )
    pr_by_exercise: dict[str, list[PRPoint]] = {}
    for name, achieved, value in prs.all():
        pr_by_exercise.setdefault(name, []).append(PRPoint(date=achieved, value=value))

    return ProgressRead(
        weight_data=weight_data,
        body_fat_data=body_fat_data,
        pr_by_exercise=pr_by_exercise,
    )


@router.post("/{user_id}", response_model=ProgressEntryCreated, status_code=201)
async def add_progress(
    user_id: int,
    payload: ProgressEntryCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Record today's weight (and optional body fat). Only the account owner may write."""
    require_same_user(user_id, current_user)
    user = await db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")

    entry = ProgressEntry(
        user_id=user_id,
        date=utc_today(),
        weight=payload.weight,
        body_fat_percentage=payload.body_fat_percentage,
    )
    db.add(entry)
    user.weight = payload.weight
    await db.flush()
    return ProgressEntryCreated(message="Progress recorded", progress_id=entry.id)

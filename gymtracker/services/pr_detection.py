"""PR detection: append a personal record when a value beats the all-time best."""

from datetime import date

from sqlalchemy import Date, Float, Integer, String, exists, insert, literal, select
from sqlalchemy.ext.asyncio import AsyncSession

from gymtracker.core.enums import PRType
from gymtracker.models.personal_record import PersonalRecord


async def record_personal_record_if_greater(
    db: AsyncSession,
    user_id: int,
    exercise_id: int,
    value: float,
    achieved_on: date,
    pr_type: PRType = PRType.WEIGHT,
) -> bool:
    """
    Insert a PR row only if ``value`` strictly exceeds every stored value for
    (user, exercise, type). Compare and write happen in one INSERT ... SELECT
    ... WHERE NOT EXISTS statement, so two racing submissions cannot both
    append for the same best. Returns True when a row was written.
    """
    at_least_as_good = select(PersonalRecord.id).where(
        PersonalRecord.user_id == user_id,
        PersonalRecord.exercise_id == exercise_id,
        PersonalRecord.type == pr_type.value,
        PersonalRecord.value >= value,
    )
    candidate = select(
        literal(user_id, Integer()),
        literal(exercise_id, Integer()),
        literal(float(value), Float()),
        literal(achieved_on, Date()),
        literal(pr_type.value, String()),
    ).where(~exists(at_least_as_good))

    result = await db.execute(
        insert(PersonalRecord)
        .from_select(["user_id", "exercise_id", "value", "date_achieved", "type"], candidate)
        .returning(PersonalRecord.id)
    )
    return result.scalar_one_or_none() is not None

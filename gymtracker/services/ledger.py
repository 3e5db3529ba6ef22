"""Workout ledger: log one set as a single all-or-nothing unit.

The unit runs on one session inside one transaction:

1. find or create today's open workout for the user
2. find or create the workout's row for the exercise
3. compute the next set number
4. insert the set
5. append a personal record if the weight beats the user's best

Concurrent submissions that collide on the store's unique indexes (one open
workout per user/day, one row per workout/exercise, one set per number) or
lose a serialization check are retried from step 1, up to
``settings.ledger_max_attempts``, with a growing jittered pause between attempts.
"""

from __future__ import annotations

import asyncio
import logging
import random
from datetime import date, datetime

from sqlalchemy import func, select
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from gymtracker.core.clock import utc_now
from gymtracker.core.config import Settings
from gymtracker.core.errors import NotFound, StoreError
from gymtracker.models.equipment import Equipment
from gymtracker.models.exercise import Exercise
from gymtracker.models.user import User
from gymtracker.models.workout import ExerciseSet, Workout, WorkoutExercise
from gymtracker.schemas.workout import SetCreate, SetLogged
from gymtracker.services.pr_detection import record_personal_record_if_greater

logger = logging.getLogger(__name__)

# unique_violation, serialization_failure, deadlock_detected
RETRYABLE_SQLSTATES = {"23505", "40001", "40P01"}
RETRYABLE_SQLITE_MESSAGES = ("UNIQUE constraint failed", "database is locked")


def is_retryable_conflict(exc: DBAPIError) -> bool:
    """True for write conflicts that a fresh attempt can resolve."""
    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in RETRYABLE_SQLSTATES:
        return True
    message = str(orig) if orig is not None else str(exc)
    return any(m in message for m in RETRYABLE_SQLITE_MESSAGES)


def retry_delay(attempt: int, backoff: float) -> float:
    """Pause after failed ``attempt`` (1-based): backoff doubled per attempt, +-50% jitter."""
    return backoff * 2 ** (attempt - 1) * random.uniform(0.5, 1.5)


async def ensure_references_exist(
    db: AsyncSession,
    user_id: int,
    exercise_id: int,
    equipment_id: str | None,
) -> None:
    if await db.get(User, user_id) is None:
        raise NotFound("User not found")
    if await db.get(Exercise, exercise_id) is None:
        raise NotFound("Exercise not found")
    if equipment_id is not None and await db.get(Equipment, equipment_id) is None:
        raise NotFound("Equipment not found")


async def find_or_create_open_workout(
    db: AsyncSession,
    user_id: int,
    today: date,
    now: datetime,
) -> int:
    """Id of the user's open workout for ``today``, creating it if there is none."""
    result = await db.execute(
        select(Workout.id)
        .where(Workout.user_id == user_id, Workout.date == today, Workout.end_time.is_(None))
        .limit(1)
    )
    workout_id = result.scalar_one_or_none()
    if workout_id is not None:
        return workout_id
    workout = Workout(user_id=user_id, date=today, start_time=now)
    db.add(workout)
    await db.flush()
    return workout.id


async def find_or_create_workout_exercise(
    db: AsyncSession,
    workout_id: int,
    exercise_id: int,
    equipment_id: str | None,
) -> int:
    result = await db.execute(
        select(WorkoutExercise.id).where(
            WorkoutExercise.workout_id == workout_id,
            WorkoutExercise.exercise_id == exercise_id,
        )
    )
    workout_exercise_id = result.scalar_one_or_none()
    if workout_exercise_id is not None:
        return workout_exercise_id
    workout_exercise = WorkoutExercise(
        workout_id=workout_id,
        exercise_id=exercise_id,
        equipment_id=equipment_id,
    )
    db.add(workout_exercise)
    await db.flush()
    return workout_exercise.id


async def next_set_number(db: AsyncSession, workout_exercise_id: int) -> int:
    """max(set_number) + 1 within the workout exercise, 1 for the first set."""
    result = await db.execute(
        select(func.max(ExerciseSet.set_number)).where(
            ExerciseSet.workout_exercise_id == workout_exercise_id
        )
    )
    return (result.scalar() or 0) + 1


async def insert_set(
    db: AsyncSession,
    workout_exercise_id: int,
    set_number: int,
    weight: float,
    reps: int | None,
    notes: str | None,
) -> int:
    set_ = ExerciseSet(
        workout_exercise_id=workout_exercise_id,
        set_number=set_number,
        weight=weight,
        reps=reps,
        notes=notes,
    )
    db.add(set_)
    await db.flush()
    return set_.id


async def _log_set_once(
    session_factory: async_sessionmaker[AsyncSession],
    payload: SetCreate,
    isolation_level: str | None,
) -> SetLogged:
    now = utc_now()
    today = now.date()
    async with session_factory() as db:
        async with db.begin():
            if isolation_level:
                # Must be the first use of the session so the connection opens with it
                await db.connection(execution_options={"isolation_level": isolation_level})

            await ensure_references_exist(db, payload.user_id, payload.exercise_id, payload.equipment_id)
            workout_id = await find_or_create_open_workout(db, payload.user_id, today, now)
            workout_exercise_id = await find_or_create_workout_exercise(
                db, workout_id, payload.exercise_id, payload.equipment_id
            )
            set_number = await next_set_number(db, workout_exercise_id)
            set_id = await insert_set(
                db, workout_exercise_id, set_number, payload.weight, payload.reps, payload.notes
            )
            is_pr = await record_personal_record_if_greater(
                db, payload.user_id, payload.exercise_id, payload.weight, today
            )
        # db.begin() committed here; any exception above rolled everything back

    return SetLogged(
        set_id=set_id,
        workout_id=workout_id,
        workout_exercise_id=workout_exercise_id,
        set_number=set_number,
        is_personal_record=is_pr,
    )


async def log_set(
    session_factory: async_sessionmaker[AsyncSession],
    payload: SetCreate,
    settings: Settings,
) -> SetLogged:
    """Log a set for the user's open workout of today; see module docstring."""
    attempts = max(1, settings.ledger_max_attempts)
    for attempt in range(1, attempts + 1):
        try:
            return await asyncio.wait_for(
                _log_set_once(session_factory, payload, settings.ledger_isolation_level),
                timeout=settings.ledger_transaction_timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            logger.error(
                "Set logging for user %s timed out after %.1fs",
                payload.user_id,
                settings.ledger_transaction_timeout_seconds,
            )
            raise StoreError("Set logging timed out") from exc
        except DBAPIError as exc:
            message = str(exc.orig) if exc.orig is not None else str(exc)
            if not is_retryable_conflict(exc):
                logger.exception("Set logging for user %s failed", payload.user_id)
                raise StoreError(message) from exc
            if attempt == attempts:
                logger.error(
                    "Set logging for user %s still conflicting after %d attempts: %s",
                    payload.user_id,
                    attempts,
                    message,
                )
                raise StoreError(message) from exc
            logger.warning(
                "Set logging conflict for user %s (attempt %d/%d), retrying: %s",
                payload.user_id,
                attempt,
                attempts,
                message,
            )
            await asyncio.sleep(retry_delay(attempt, settings.ledger_retry_backoff_seconds))
    raise StoreError("Set logging failed")

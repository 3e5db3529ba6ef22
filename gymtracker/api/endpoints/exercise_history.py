"""Past sets of one exercise for one user, grouped per workout."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gymtracker.core.config import Settings, get_settings
from gymtracker.core.constants import MAX_HISTORY_LIMIT
from gymtracker.db.session import get_db
from gymtracker.models.workout import ExerciseSet, Workout, WorkoutExercise
from gymtracker.schemas.workout import ExerciseHistoryEntry, HistorySet

router = APIRouter()


@router.get("/{exercise_id}/{user_id}", response_model=list[ExerciseHistoryEntry])
async def get_exercise_history(
    exercise_id: int,
    user_id: int,
    limit: int | None = Query(None, ge=1, le=MAX_HISTORY_LIMIT),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """The ``limit`` most recent workouts containing the exercise, newest first; sets ascending."""
    result = await db.execute(
        select(WorkoutExercise.id, Workout.id, Workout.date)
        .join(Workout, Workout.id == WorkoutExercise.workout_id)
        .where(Workout.user_id == user_id, WorkoutExercise.exercise_id == exercise_id)
        .order_by(Workout.date.desc(), Workout.start_time.desc(), Workout.id.desc())
        .limit(limit or settings.exercise_history_limit)
    )
    entries = [
        ExerciseHistoryEntry(date=day, workout_id=workout_id, workout_exercise_id=we_id, sets=[])
        for we_id, workout_id, day in result.all()
    ]
    if not entries:
        return []

    by_workout_exercise = {e.workout_exercise_id: e for e in entries}
    sets = await db.execute(
        select(ExerciseSet)
        .where(ExerciseSet.workout_exercise_id.in_(by_workout_exercise))
        .order_by(ExerciseSet.workout_exercise_id, ExerciseSet.set_number)
    )
    for s in sets.scalars().all():
        by_workout_exercise[s.workout_exercise_id].sets.append(
            HistorySet(set_number=s.set_number, weight=s.weight, reps=s.reps, notes=s.notes)
        )
    return entries

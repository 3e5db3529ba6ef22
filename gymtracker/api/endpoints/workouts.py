"""Workout list, per-workout detail and closing a workout."""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from gymtracker.core.clock import utc_now
from gymtracker.core.errors import Conflict, NotFound
from gymtracker.db.session import get_db
from gymtracker.models.exercise import Exercise
from gymtracker.models.workout import ExerciseSet, Workout, WorkoutExercise
from gymtracker.schemas.workout import SetDetail, WorkoutEnded, WorkoutExerciseDetail, WorkoutSummary

router = APIRouter()


@router.get("/{user_id}", response_model=list[WorkoutSummary])
async def list_workouts(user_id: int, db: AsyncSession = Depends(get_db)):
    """User's workouts, newest first, with the names of the exercises performed."""
    result = await db.execute(
        select(Workout)
        .where(Workout.user_id == user_id)
        .options(selectinload(Workout.exercises).selectinload(WorkoutExercise.exercise))
        .order_by(Workout.date.desc(), Workout.start_time.desc())
    )
    summaries = []
    for w in result.scalars().all():
        names: list[str] = []
        for we in sorted(w.exercises, key=lambda we: we.id):
            if we.exercise and we.exercise.name not in names:
                names.append(we.exercise.name)
        summaries.append(
            WorkoutSummary(
                workout_id=w.id,
                date=w.date,
                start_time=w.start_time,
                end_time=w.end_time,
                exercises=names,
            )
        )
    return summaries


@router.get("/{workout_id}/details", response_model=list[WorkoutExerciseDetail])
async def get_workout_details(workout_id: int, db: AsyncSession = Depends(get_db)):
    """Sets of a workout grouped by exercise name. Unknown workout gives an empty list."""
    result = await db.execute(
        select(Exercise.name, ExerciseSet.set_number, ExerciseSet.weight, ExerciseSet.reps)
        .join(WorkoutExercise, WorkoutExercise.exercise_id == Exercise.id)
        .join(ExerciseSet, ExerciseSet.workout_exercise_id == WorkoutExercise.id)
        .where(WorkoutExercise.workout_id == workout_id)
        .order_by(Exercise.name, ExerciseSet.set_number)
    )
    grouped: dict[str, list[SetDetail]] = {}
    for name, set_number, weight, reps in result.all():
        grouped.setdefault(name, []).append(SetDetail(set=set_number, reps=reps, weight=weight))

    return [
        WorkoutExerciseDetail(
            name=name,
            sets=len(details),
            reps=details[0].reps,
            weight=details[0].weight,
            details=details,
        )
        for name, details in grouped.items()
    ]


@router.post("/{workout_id}/end", response_model=WorkoutEnded)
async def end_workout(workout_id: int, db: AsyncSession = Depends(get_db)):
    """Close an open workout. The next logged set that day opens a new one."""
    workout = await db.get(Workout, workout_id)
    if workout is None:
        raise NotFound("Workout not found")
    if workout.end_time is not None:
        raise Conflict("Workout already ended")
    workout.end_time = utc_now()
    await db.flush()
    return WorkoutEnded(workout_id=workout.id, end_time=workout.end_time)

"""Set logging and workout read schemas."""

import datetime as dt

from pydantic import BaseModel, Field


class SetCreate(BaseModel):
    """A set submitted after an NFC scan or a direct exercise pick."""

    user_id: int
    exercise_id: int
    equipment_id: str | None = Field(None, max_length=50)
    weight: float = Field(..., gt=0)
    reps: int | None = Field(None, ge=0)
    notes: str | None = Field(None, max_length=500)


class SetLogged(BaseModel):
    success: bool = True
    set_id: int
    workout_id: int
    workout_exercise_id: int
    set_number: int
    is_personal_record: bool


class WorkoutEnded(BaseModel):
    workout_id: int
    end_time: dt.datetime


class HistorySet(BaseModel):
    set_number: int
    weight: float
    reps: int | None = None
    notes: str | None = None


class ExerciseHistoryEntry(BaseModel):
    """One past workout's sets for a single exercise."""

    date: dt.date
    workout_id: int
    workout_exercise_id: int
    sets: list[HistorySet]


class WorkoutSummary(BaseModel):
    workout_id: int
    date: dt.date
    start_time: dt.datetime
    end_time: dt.datetime | None = None
    exercises: list[str]


class SetDetail(BaseModel):
    set: int
    reps: int | None = None
    weight: float


class WorkoutExerciseDetail(BaseModel):
    """Per-exercise block of a workout; reps/weight are taken from the first set."""

    name: str
    sets: int
    reps: int | None = None
    weight: float | None = None
    details: list[SetDetail]

"""ORM models - import all so Base.metadata is complete for migrations."""

from gymtracker.models.equipment import Equipment
from gymtracker.models.exercise import Category, Exercise
from gymtracker.models.nfc_tag import NfcTag
from gymtracker.models.personal_record import PersonalRecord
from gymtracker.models.progress import ProgressEntry
from gymtracker.models.user import User
from gymtracker.models.workout import ExerciseSet, Workout, WorkoutExercise

__all__ = [
    "Category",
    "Equipment",
    "Exercise",
    "ExerciseSet",
    "NfcTag",
    "PersonalRecord",
    "ProgressEntry",
    "User",
    "Workout",
    "WorkoutExercise",
]

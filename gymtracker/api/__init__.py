"""API router aggregation."""

from fastapi import APIRouter

from gymtracker.api.endpoints import (
    auth,
    categories,
    equipment,
    exercise_history,
    exercises,
    health,
    nfc_tags,
    personal_records,
    profile,
    progress,
    sets,
    workouts,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(nfc_tags.router, prefix="/nfc-tags", tags=["nfc-tags"])
api_router.include_router(exercises.router, prefix="/exercises", tags=["exercises"])
api_router.include_router(categories.router, prefix="/categories", tags=["exercises"])
api_router.include_router(equipment.router, prefix="/equipment", tags=["equipment"])

api_router.include_router(sets.router, prefix="/sets", tags=["sets"])
api_router.include_router(workouts.router, prefix="/workouts", tags=["workouts"])
api_router.include_router(exercise_history.router, prefix="/exercise-history", tags=["workouts"])
api_router.include_router(personal_records.router, prefix="/personal-records", tags=["personal-records"])
api_router.include_router(progress.router, prefix="/progress", tags=["progress"])

api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(profile.router, prefix="/profile", tags=["profile"])

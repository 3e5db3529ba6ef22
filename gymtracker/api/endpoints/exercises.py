"""Exercise catalog endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gymtracker.core.errors import NotFound
from gymtracker.db.session import get_db
from gymtracker.models.exercise import Category, Exercise
from gymtracker.schemas.exercise import ExerciseCreate, ExerciseCreated, ExerciseDetail, ExerciseRead

router = APIRouter()


def _exercise_query():
    return select(
        Exercise.id.label("exercise_id"),
        Exercise.name,
        Exercise.category_id,
        Category.name.label("category"),
        Exercise.equipment,
        Exercise.description,
        Exercise.instructions,
        Exercise.video_url,
    ).join(Category, Category.id == Exercise.category_id)


@router.get("", response_model=list[ExerciseRead])
async def list_exercises(db: AsyncSession = Depends(get_db)):
    """All exercises with their category name, ordered by name."""
    result = await db.execute(_exercise_query().order_by(Exercise.name))
    return [ExerciseRead.model_validate(row._asdict()) for row in result.all()]


@router.get("/category/{category_id}", response_model=list[ExerciseRead])
async def list_exercises_by_category(category_id: int, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        _exercise_query().where(Exercise.category_id == category_id).order_by(Exercise.name)
    )
    return [ExerciseRead.model_validate(row._asdict()) for row in result.all()]


@router.get("/{exercise_id}", response_model=ExerciseDetail)
async def get_exercise(exercise_id: int, db: AsyncSession = Depends(get_db)):
    """Single exercise including instructions and video link."""
    result = await db.execute(_exercise_query().where(Exercise.id == exercise_id))
    row = result.one_or_none()
    if row is None:
        raise NotFound("Exercise not found")
    return ExerciseDetail.model_validate(row._asdict())


@router.post("", response_model=ExerciseCreated, status_code=201)
async def create_exercise(payload: ExerciseCreate, db: AsyncSession = Depends(get_db)):
    """Add an exercise to the catalog. Name and category are required."""
    if await db.get(Category, payload.category_id) is None:
        raise NotFound("Category not found")
    exercise = Exercise(**payload.model_dump())
    db.add(exercise)
    await db.flush()
    return ExerciseCreated(exercise_id=exercise.id, message="Exercise added")

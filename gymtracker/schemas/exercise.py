"""Category and exercise catalog schemas."""

from pydantic import BaseModel, ConfigDict, Field


class CategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class ExerciseCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category_id: int
    equipment: str | None = Field(None, max_length=255)
    description: str | None = None
    instructions: str | None = None
    video_url: str | None = Field(None, max_length=500)


class ExerciseRead(BaseModel):
    """Catalog listing row; ``category`` is the category name."""

    exercise_id: int
    name: str
    category_id: int
    category: str
    equipment: str | None = None
    description: str | None = None


class ExerciseDetail(ExerciseRead):
    instructions: str | None = None
    video_url: str | None = None


class ExerciseCreated(BaseModel):
    success: bool = True
    exercise_id: int
    message: str

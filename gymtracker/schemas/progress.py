"""Body composition progress schemas."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from gymtracker.core.constants import MAX_BODY_FAT_PERCENTAGE, MIN_BODY_FAT_PERCENTAGE


class ProgressEntryCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    weight: float = Field(..., gt=0, lt=500, description="Body weight in kg")
    body_fat_percentage: float | None = Field(
        None,
        alias="bodyFatPercentage",
        ge=MIN_BODY_FAT_PERCENTAGE,
        le=MAX_BODY_FAT_PERCENTAGE,
        description="Body fat %",
    )


class ProgressEntryCreated(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    progress_id: int = Field(..., alias="progressId")


class WeightPoint(BaseModel):
    date: dt.date
    weight: float


class BodyFatPoint(BaseModel):
    date: dt.date
    body_fat_percentage: float


class PRPoint(BaseModel):
    date: dt.date
    value: float


class ProgressRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    weight_data: list[WeightPoint] = Field(default_factory=list, alias="weightData")
    body_fat_data: list[BodyFatPoint] = Field(default_factory=list, alias="bodyFatData")
    pr_by_exercise: dict[str, list[PRPoint]] = Field(default_factory=dict, alias="prByExercise")

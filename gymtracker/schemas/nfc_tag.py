"""NFC tag binding schemas."""

from pydantic import BaseModel, Field


class NfcTagUpsert(BaseModel):
    tag_id: str = Field(..., min_length=1, max_length=64)
    equipment_id: str = Field(..., min_length=1, max_length=50)
    exercise_id: int


class NfcTagUpserted(BaseModel):
    message: str
    tag_id: str
    created: bool


class NfcTagResolved(BaseModel):
    """Tag lookup result with equipment and exercise fields denormalized."""

    tag_id: str
    equipment_id: str
    equipment_name: str
    location: str | None = None
    exercise_id: int
    exercise_name: str
    category_id: int
    category_name: str

"""Personal record schemas."""

from datetime import date

from pydantic import BaseModel


class PersonalRecordRead(BaseModel):
    pr_id: int
    value: float
    date_achieved: date
    type: str
    exercise_id: int
    exercise_name: str
    category: str

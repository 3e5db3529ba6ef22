"""Equipment schemas."""

from pydantic import BaseModel, ConfigDict


class EquipmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    location: str | None = None

from pydantic import BaseModel, Field, field_validator

from app.models.subject import ActivityType


def _normalize_equipment(value: list[str] | None) -> list[str] | None:
    if value is None:
        return None
    return [item.strip() for item in value if item and item.strip()]


class RoomBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    capacity: int = Field(ge=1, le=1000)
    types_allowed: list[ActivityType] = Field(min_length=1, max_length=3)
    equipment: list[str] = Field(default_factory=list, max_length=50)

    @field_validator("types_allowed")
    @classmethod
    def dedupe_types(cls, value: list[ActivityType]) -> list[ActivityType]:
        return list(dict.fromkeys(value))

    @field_validator("equipment")
    @classmethod
    def normalize_equipment(cls, value: list[str]) -> list[str]:
        return _normalize_equipment(value)


class RoomCreate(RoomBase):
    pass


class RoomUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    capacity: int | None = Field(default=None, ge=1, le=1000)
    types_allowed: list[ActivityType] | None = Field(default=None, min_length=1, max_length=3)
    equipment: list[str] | None = Field(default=None, max_length=50)

    @field_validator("equipment")
    @classmethod
    def normalize_equipment(cls, value: list[str] | None) -> list[str] | None:
        return _normalize_equipment(value)


class RoomOut(RoomBase):
    id: str

    model_config = {"from_attributes": True}

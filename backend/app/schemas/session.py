from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from app.models.subject import ActivityType
from app.schemas.timetable import is_week_ref
from app.services.slot_calendar import DAYS

DayName = Literal["monday", "tuesday", "wednesday", "thursday", "friday", "saturday"]
ConflictType = Literal["teacher", "room", "group"]


class SessionPlacement(BaseModel):
    teacher_id: str = Field(min_length=1, max_length=36)
    group_ids: list[str] = Field(min_length=1, max_length=20)
    room_id: str = Field(min_length=1, max_length=36)
    day: DayName
    start_slot_index: int = Field(ge=0, le=4)
    slot_count: int = Field(default=1, ge=1, le=2)
    type: ActivityType
    week_ref: str | None = None

    @field_validator("day", mode="before")
    @classmethod
    def normalize_day(cls, value: str) -> str:
        if isinstance(value, str):
            value = value.strip().lower()
            if value not in DAYS:
                raise ValueError("Invalid day value")
        return value

    @field_validator("group_ids")
    @classmethod
    def dedupe_groups(cls, value: list[str]) -> list[str]:
        cleaned = list(dict.fromkeys(item.strip() for item in value if item.strip()))
        if not cleaned:
            raise ValueError("At least one group is required")
        return cleaned

    @field_validator("week_ref")
    @classmethod
    def validate_week_ref(cls, value: str | None) -> str | None:
        if value is not None and not is_week_ref(value):
            raise ValueError("week_ref must use the YYYY-Www format")
        return value


class SessionMoveRequest(BaseModel):
    day: DayName | None = None
    start_slot_index: int | None = Field(default=None, ge=0, le=4)
    room_id: str | None = Field(default=None, min_length=1, max_length=36)


class ValidationResult(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)


class ConflictOut(BaseModel):
    type: ConflictType
    session_id: str
    day: str
    start_slot_index: int
    slot_count: int
    group_id: str | None = None


class SessionCheckResponse(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)
    conflicts: list[ConflictOut] = Field(default_factory=list)

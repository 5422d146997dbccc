from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.subject import ActivityType
from app.services.slot_calendar import SLOT_DURATION_HOURS, weekly_slot_count


class SubjectBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    code: str = Field(min_length=1, max_length=50)
    weekly_hours: float = Field(ge=SLOT_DURATION_HOURS, le=40)
    type: ActivityType = ActivityType.lecture
    slots_per_session: int = Field(default=1, ge=1, le=2)
    teacher_id: str = Field(min_length=1, max_length=36)
    group_ids: list[str] = Field(min_length=1, max_length=20)

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        code = value.strip().upper()
        if not code:
            raise ValueError("code cannot be blank")
        return code

    @field_validator("group_ids")
    @classmethod
    def dedupe_groups(cls, value: list[str]) -> list[str]:
        cleaned = list(dict.fromkeys(item.strip() for item in value if item.strip()))
        if not cleaned:
            raise ValueError("At least one group is required")
        return cleaned

    @model_validator(mode="after")
    def enforce_practical_block(self) -> "SubjectBase":
        # Practicals always run as two consecutive slots.
        if self.type == ActivityType.practical:
            self.slots_per_session = 2
        return self


class SubjectCreate(SubjectBase):
    pass


class SubjectUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    code: str | None = Field(default=None, min_length=1, max_length=50)
    weekly_hours: float | None = Field(default=None, ge=SLOT_DURATION_HOURS, le=40)
    type: ActivityType | None = None
    slots_per_session: int | None = Field(default=None, ge=1, le=2)
    teacher_id: str | None = Field(default=None, min_length=1, max_length=36)
    group_ids: list[str] | None = Field(default=None, min_length=1, max_length=20)


class SubjectOut(SubjectBase):
    id: str
    weekly_slots: int

    @model_validator(mode="after")
    def sync_weekly_slots(self) -> "SubjectOut":
        self.weekly_slots = weekly_slot_count(self.weekly_hours)
        return self

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, Field

from app.models.subject import ActivityType

WEEK_REF_PATTERN = re.compile(r"^\d{4}-W\d{2}$")


def is_week_ref(value: str) -> bool:
    return bool(WEEK_REF_PATTERN.match(value))


class SessionOut(BaseModel):
    id: str
    week_ref: str | None = None
    subject_id: str
    teacher_id: str
    room_id: str
    group_ids: list[str] = Field(default_factory=list)
    day: str
    start_slot_index: int
    slot_count: int
    type: ActivityType


class SessionDetailOut(SessionOut):
    subject_name: str | None = None
    subject_code: str | None = None
    teacher_name: str | None = None
    room_name: str | None = None
    room_capacity: int | None = None
    group_names: list[str] = Field(default_factory=list)
    start_time: str
    end_time: str


class TimetableOut(BaseModel):
    id: str
    group_id: str
    week_ref: str
    session_ids: list[str] = Field(default_factory=list)
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class TimetableDetailOut(TimetableOut):
    group_name: str | None = None
    sessions: list[SessionDetailOut] = Field(default_factory=list)

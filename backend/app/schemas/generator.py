from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from app.schemas.timetable import TimetableOut

GenerationScope = Literal["all", "group"]
Rounding = Literal["up", "down"]


class ScoringWeights(BaseModel):
    teacher_preference: int = Field(default=3, ge=0, le=100)
    room_fit: int = Field(default=1, ge=0, le=100)
    balance: int = Field(default=2, ge=0, le=100)


class GenerationStats(BaseModel):
    total_demands: int
    placed_sessions: int
    unplaced_demands: int


class UnplacedDemandOut(BaseModel):
    subject: str
    type: str
    groups: list[str]


class GenerateTimetableResponse(BaseModel):
    success: bool = True
    week_ref: str
    scope: GenerationScope
    timetables: list[TimetableOut]
    stats: GenerationStats
    unplaced_demands: list[UnplacedDemandOut]

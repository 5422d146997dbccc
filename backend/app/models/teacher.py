import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base
from app.services.slot_calendar import DAYS, PERIODS


class PreferenceLevel(str, Enum):
    prefer = "prefer"
    neutral = "neutral"
    avoid = "avoid"


def default_availability() -> dict[str, dict[str, bool]]:
    # Wednesday afternoon is blocked unless a teacher explicitly opens it.
    availability = {day: {period: True for period in PERIODS} for day in DAYS}
    availability["wednesday"]["afternoon"] = False
    return availability


def default_preferences() -> dict[str, dict[str, str]]:
    return {day: {period: PreferenceLevel.neutral.value for period in PERIODS} for day in DAYS}


class Teacher(Base):
    __tablename__ = "teachers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    availability: Mapped[dict[str, dict[str, bool]]] = mapped_column(
        JSON, nullable=False, default=default_availability
    )
    preferences: Mapped[dict[str, dict[str, str]]] = mapped_column(
        JSON, nullable=False, default=default_preferences
    )
    max_load_per_week: Mapped[int] = mapped_column(Integer, nullable=False, default=20)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, Float, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.db.base import Base


class ActivityType(str, Enum):
    lecture = "CM"
    tutorial = "TD"
    practical = "TP"


class Subject(Base):
    __tablename__ = "subjects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    weekly_hours: Mapped[float] = mapped_column(Float, nullable=False)
    type: Mapped[ActivityType] = mapped_column(
        SAEnum(ActivityType, name="activity_type", values_callable=lambda items: [item.value for item in items]),
        nullable=False,
        default=ActivityType.lecture,
    )
    slots_per_session: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    weekly_slots: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    teacher_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())


class SubjectGroup(Base):
    __tablename__ = "subject_groups"
    __table_args__ = (
        UniqueConstraint("subject_id", "group_id", name="uq_subject_groups_subject_group"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    subject_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    group_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

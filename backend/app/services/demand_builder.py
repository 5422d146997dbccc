from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from app.models.subject import ActivityType
from app.services.slot_calendar import weekly_slot_count

logger = logging.getLogger(__name__)

RoundingMode = Literal["up", "down"]

TYPE_PRIORITY: dict[str, int] = {
    ActivityType.practical.value: 3,
    ActivityType.tutorial.value: 2,
    ActivityType.lecture.value: 1,
}


@dataclass(frozen=True)
class SubjectSpec:
    id: str
    name: str
    code: str
    weekly_hours: float
    type: str
    slots_per_session: int
    teacher_id: str
    group_ids: tuple[str, ...]


@dataclass(frozen=True)
class SessionDemand:
    subject_id: str
    subject_name: str
    subject_code: str
    teacher: Any
    groups: tuple[Any, ...]
    type: str
    slots_per_session: int
    total_group_size: int

    @property
    def teacher_id(self) -> str:
        return self.teacher.id

    @property
    def group_ids(self) -> tuple[str, ...]:
        return tuple(group.id for group in self.groups)


def type_value(value: ActivityType | str) -> str:
    return value.value if isinstance(value, ActivityType) else str(value)


def effective_slots_per_session(session_type: ActivityType | str, configured: int) -> int:
    if type_value(session_type) == ActivityType.practical.value:
        return 2
    return configured


def occurrence_count(total_slots: int, slots_per_session: int, rounding: RoundingMode = "up") -> int:
    if slots_per_session == 1:
        return total_slots
    occurrences, remainder = divmod(total_slots, slots_per_session)
    if remainder and rounding == "up":
        # One extra full-length session covers the leftover slot.
        occurrences += 1
    return occurrences


def build_session_demands(
    subjects: Iterable[SubjectSpec],
    teachers: Mapping[str, Any],
    groups: Mapping[str, Any],
    rounding: RoundingMode = "up",
) -> list[SessionDemand]:
    demands: list[SessionDemand] = []
    for subject in subjects:
        teacher = teachers.get(subject.teacher_id)
        resolved_groups = [groups.get(group_id) for group_id in subject.group_ids]
        if teacher is None or not resolved_groups or any(group is None for group in resolved_groups):
            logger.debug("Skipping subject %s: teacher or groups could not be resolved", subject.code)
            continue

        session_type = type_value(subject.type)
        per_session = effective_slots_per_session(session_type, subject.slots_per_session)
        total_slots = weekly_slot_count(subject.weekly_hours)
        occurrences = occurrence_count(total_slots, per_session, rounding)
        if occurrences * per_session < total_slots:
            logger.debug(
                "Subject %s under-provisioned by rounding=%s: %s of %s slots",
                subject.code,
                rounding,
                occurrences * per_session,
                total_slots,
            )

        group_tuple = tuple(resolved_groups)
        total_size = sum(group.size for group in group_tuple)
        for _ in range(occurrences):
            demands.append(
                SessionDemand(
                    subject_id=subject.id,
                    subject_name=subject.name,
                    subject_code=subject.code,
                    teacher=teacher,
                    groups=group_tuple,
                    type=session_type,
                    slots_per_session=per_session,
                    total_group_size=total_size,
                )
            )
    return demands


def order_demands_by_difficulty(demands: Sequence[SessionDemand]) -> list[SessionDemand]:
    # sorted() is stable, so equal demands keep their encounter order.
    return sorted(
        demands,
        key=lambda demand: (
            -demand.slots_per_session,
            -demand.total_group_size,
            -TYPE_PRIORITY.get(demand.type, 0),
        ),
    )

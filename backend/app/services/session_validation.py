from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.core.exceptions import ResourceNotFoundError, SessionConflictError, SessionValidationError
from app.models.class_session import ClassSession
from app.models.room import Room
from app.models.teacher import Teacher
from app.schemas.session import ConflictOut, ConflictType, SessionMoveRequest, SessionPlacement, ValidationResult
from app.services import entity_store
from app.services.generation_lease import GenerationLease, get_generation_lease
from app.services.placement import room_allows, teacher_available
from app.services.slot_calendar import RESTRICTED_DAY, has_slot, period_of, periods_covered

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionConflict:
    type: ConflictType
    session: ClassSession
    group_id: str | None = None

    def to_out(self) -> ConflictOut:
        return ConflictOut(
            type=self.type,
            session_id=self.session.id,
            day=self.session.day,
            start_slot_index=self.session.start_slot_index,
            slot_count=self.session.slot_count,
            group_id=self.group_id,
        )


def ranges_overlap(start_a: int, count_a: int, start_b: int, count_b: int) -> bool:
    end_a = start_a + count_a - 1
    end_b = start_b + count_b - 1
    return not (end_a < start_b or start_a > end_b)


def validate_session(db: Session, placement: SessionPlacement) -> ValidationResult:
    errors: list[str] = []
    session_type = placement.type.value

    teacher = db.get(Teacher, placement.teacher_id)
    if teacher is None:
        return ValidationResult(valid=False, errors=["Teacher not found"])

    for covered in periods_covered(placement.day, placement.start_slot_index, placement.slot_count):
        if not teacher_available(teacher, placement.day, covered):
            errors.append(f"Teacher not available on {placement.day} {covered}")

    period = period_of(placement.start_slot_index)

    if placement.day == RESTRICTED_DAY and period == "afternoon":
        errors.append("Wednesday afternoon is excluded")

    room = db.get(Room, placement.room_id)
    groups = entity_store.load_groups(db, placement.group_ids)
    if room is None:
        errors.append("Room not found")
    else:
        if not room_allows(room, session_type):
            errors.append(f"Room does not allow {session_type} sessions")
        total_size = sum(group.size for group in groups.values())
        if room.capacity < total_size:
            errors.append(f"Room capacity ({room.capacity}) insufficient for {total_size} students")

    for group_id in placement.group_ids:
        if group_id not in groups:
            errors.append(f"Group not found: {group_id}")

    if not has_slot(placement.day, placement.start_slot_index):
        errors.append(f"Invalid slot index {placement.start_slot_index} for {placement.day}")

    if placement.slot_count == 2 and not has_slot(placement.day, placement.start_slot_index + 1):
        errors.append("Second consecutive slot not available")

    return ValidationResult(valid=not errors, errors=errors)


def check_conflicts(
    db: Session,
    placement: SessionPlacement,
    exclude_session_id: str | None = None,
) -> list[SessionConflict]:
    candidates = entity_store.sessions_sharing_resources(
        db,
        day=placement.day,
        teacher_id=placement.teacher_id,
        room_id=placement.room_id,
        group_ids=placement.group_ids,
        exclude_session_id=exclude_session_id,
        week_ref=placement.week_ref,
    )
    groups_by_session = entity_store.session_group_ids(db, [item.id for item in candidates])

    conflicts: list[SessionConflict] = []
    for existing in candidates:
        if not ranges_overlap(
            placement.start_slot_index,
            placement.slot_count,
            existing.start_slot_index,
            existing.slot_count,
        ):
            continue
        if existing.teacher_id == placement.teacher_id:
            conflicts.append(SessionConflict(type="teacher", session=existing))
        if existing.room_id == placement.room_id:
            conflicts.append(SessionConflict(type="room", session=existing))
        existing_groups = set(groups_by_session.get(existing.id, []))
        for group_id in placement.group_ids:
            if group_id in existing_groups:
                conflicts.append(SessionConflict(type="group", session=existing, group_id=group_id))
    return conflicts


def placement_for_session(db: Session, session: ClassSession) -> SessionPlacement:
    group_ids = entity_store.session_group_ids(db, [session.id]).get(session.id, [])
    return SessionPlacement(
        teacher_id=session.teacher_id,
        group_ids=group_ids,
        room_id=session.room_id,
        day=session.day,
        start_slot_index=session.start_slot_index,
        slot_count=session.slot_count,
        type=session.type,
        week_ref=session.week_ref,
    )


def move_session(
    db: Session,
    session_id: str,
    request: SessionMoveRequest,
    lease: GenerationLease | None = None,
) -> ClassSession:
    """Move a placed session to another day, start slot or room.

    The merged placement is validated and checked against every other
    persisted session before anything is written.
    """
    session = db.get(ClassSession, session_id)
    if session is None:
        raise ResourceNotFoundError("Session", session_id)

    current = placement_for_session(db, session)
    updates = request.model_dump(exclude_none=True)
    candidate = current.model_copy(update=updates)

    lease = lease or get_generation_lease()
    with lease.hold(session.week_ref or "unscoped", candidate.group_ids):
        validation = validate_session(db, candidate)
        if not validation.valid:
            raise SessionValidationError(validation.errors)

        conflicts = check_conflicts(db, candidate, exclude_session_id=session_id)
        if conflicts:
            logger.info("Rejected move of session %s: %s conflicts", session_id, len(conflicts))
            raise SessionConflictError([item.to_out().model_dump() for item in conflicts])

        session.day = candidate.day
        session.start_slot_index = candidate.start_slot_index
        session.room_id = candidate.room_id
        db.commit()

    db.refresh(session)
    return session

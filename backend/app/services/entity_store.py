"""Database reads and writes used by the scheduling engine and the timetable routes."""
from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session

from app.models.class_session import ClassSession, ClassSessionGroup
from app.models.group import StudentGroup
from app.models.room import Room
from app.models.subject import ActivityType, Subject, SubjectGroup
from app.models.teacher import Teacher
from app.models.timetable import Timetable
from app.services.demand_builder import SubjectSpec


def subject_group_ids(db: Session, subject_ids: Iterable[str]) -> dict[str, list[str]]:
    ids = list(subject_ids)
    if not ids:
        return {}
    rows = db.execute(
        select(SubjectGroup.subject_id, SubjectGroup.group_id)
        .where(SubjectGroup.subject_id.in_(ids))
        .order_by(SubjectGroup.subject_id, SubjectGroup.position)
    ).all()
    mapping: dict[str, list[str]] = defaultdict(list)
    for subject_id, group_id in rows:
        mapping[subject_id].append(group_id)
    return dict(mapping)


def replace_subject_groups(db: Session, subject_id: str, group_ids: list[str]) -> None:
    db.execute(delete(SubjectGroup).where(SubjectGroup.subject_id == subject_id))
    for position, group_id in enumerate(group_ids):
        db.add(SubjectGroup(subject_id=subject_id, group_id=group_id, position=position))


def load_subject_specs(db: Session, group_id: str | None = None) -> list[SubjectSpec]:
    query = select(Subject).order_by(Subject.code, Subject.id)
    if group_id is not None:
        query = query.where(
            Subject.id.in_(select(SubjectGroup.subject_id).where(SubjectGroup.group_id == group_id))
        )
    subjects = list(db.execute(query).scalars())
    groups_by_subject = subject_group_ids(db, [subject.id for subject in subjects])
    return [
        SubjectSpec(
            id=subject.id,
            name=subject.name,
            code=subject.code,
            weekly_hours=subject.weekly_hours,
            type=subject.type.value,
            slots_per_session=subject.slots_per_session,
            teacher_id=subject.teacher_id,
            group_ids=tuple(groups_by_subject.get(subject.id, [])),
        )
        for subject in subjects
    ]


def load_rooms(db: Session) -> list[Room]:
    return list(db.execute(select(Room).order_by(Room.name, Room.id)).scalars())


def load_teachers(db: Session, teacher_ids: Iterable[str]) -> dict[str, Teacher]:
    ids = set(teacher_ids)
    if not ids:
        return {}
    return {item.id: item for item in db.execute(select(Teacher).where(Teacher.id.in_(ids))).scalars()}


def load_groups(db: Session, group_ids: Iterable[str]) -> dict[str, StudentGroup]:
    ids = set(group_ids)
    if not ids:
        return {}
    return {
        item.id: item
        for item in db.execute(select(StudentGroup).where(StudentGroup.id.in_(ids))).scalars()
    }


def session_group_ids(db: Session, session_ids: Iterable[str]) -> dict[str, list[str]]:
    ids = list(session_ids)
    if not ids:
        return {}
    rows = db.execute(
        select(ClassSessionGroup.session_id, ClassSessionGroup.group_id)
        .where(ClassSessionGroup.session_id.in_(ids))
        .order_by(ClassSessionGroup.session_id, ClassSessionGroup.position)
    ).all()
    mapping: dict[str, list[str]] = defaultdict(list)
    for session_id, group_id in rows:
        mapping[session_id].append(group_id)
    return dict(mapping)


def create_session(
    db: Session,
    *,
    week_ref: str | None,
    subject_id: str,
    teacher_id: str,
    group_ids: Iterable[str],
    room_id: str,
    day: str,
    start_slot_index: int,
    slot_count: int,
    session_type: ActivityType | str,
) -> ClassSession:
    record = ClassSession(
        week_ref=week_ref,
        subject_id=subject_id,
        teacher_id=teacher_id,
        room_id=room_id,
        day=day,
        start_slot_index=start_slot_index,
        slot_count=slot_count,
        type=ActivityType(session_type),
    )
    db.add(record)
    db.flush()
    for position, group_id in enumerate(group_ids):
        db.add(ClassSessionGroup(session_id=record.id, group_id=group_id, position=position))
    return record


def sessions_sharing_resources(
    db: Session,
    *,
    day: str,
    teacher_id: str,
    room_id: str,
    group_ids: Iterable[str],
    exclude_session_id: str | None = None,
    week_ref: str | None = None,
) -> list[ClassSession]:
    """Sessions on ``day`` that use the teacher, the room or any of the groups."""
    group_session_ids = select(ClassSessionGroup.session_id).where(ClassSessionGroup.group_id.in_(list(group_ids)))
    query = (
        select(ClassSession)
        .where(
            ClassSession.day == day,
            or_(
                ClassSession.teacher_id == teacher_id,
                ClassSession.room_id == room_id,
                ClassSession.id.in_(group_session_ids),
            ),
        )
        .order_by(ClassSession.start_slot_index, ClassSession.id)
    )
    if exclude_session_id is not None:
        query = query.where(ClassSession.id != exclude_session_id)
    if week_ref is not None:
        query = query.where(ClassSession.week_ref == week_ref)
    return list(db.execute(query).scalars())


def find_timetable(db: Session, group_id: str, week_ref: str) -> Timetable | None:
    return db.execute(
        select(Timetable).where(Timetable.group_id == group_id, Timetable.week_ref == week_ref)
    ).scalar_one_or_none()


def upsert_timetable(db: Session, *, group_id: str, week_ref: str, session_ids: list[str]) -> tuple[Timetable, list[str]]:
    """Replace the session list of the (group, week) timetable, creating it if needed.

    Returns the record and the session ids it referenced before.
    """
    record = find_timetable(db, group_id, week_ref)
    if record is None:
        record = Timetable(group_id=group_id, week_ref=week_ref, session_ids=list(session_ids))
        db.add(record)
        return record, []
    previous = list(record.session_ids or [])
    record.session_ids = list(session_ids)
    return record, previous


def delete_sessions(db: Session, session_ids: Iterable[str]) -> int:
    ids = list(session_ids)
    if not ids:
        return 0
    db.execute(delete(ClassSessionGroup).where(ClassSessionGroup.session_id.in_(ids)))
    result = db.execute(delete(ClassSession).where(ClassSession.id.in_(ids)))
    return result.rowcount or 0


def prune_unreferenced_sessions(db: Session, *, week_ref: str, candidate_ids: Iterable[str]) -> int:
    candidates = set(candidate_ids)
    if not candidates:
        return 0
    db.flush()
    referenced: set[str] = set()
    for session_ids in db.execute(select(Timetable.session_ids).where(Timetable.week_ref == week_ref)).scalars():
        referenced.update(session_ids or [])
    return delete_sessions(db, sorted(candidates - referenced))


def sessions_outside_groups(db: Session, *, week_ref: str, group_ids: Iterable[str]) -> list[ClassSession]:
    """Sessions of the week referenced by a timetable of a group outside ``group_ids``.

    These are the sessions a run limited to ``group_ids`` leaves in place.
    """
    targets = set(group_ids)
    kept: set[str] = set()
    rows = db.execute(select(Timetable.group_id, Timetable.session_ids).where(Timetable.week_ref == week_ref))
    for group_id, session_ids in rows:
        if group_id not in targets:
            kept.update(session_ids or [])
    if not kept:
        return []
    query = (
        select(ClassSession)
        .where(ClassSession.week_ref == week_ref, ClassSession.id.in_(sorted(kept)))
        .order_by(ClassSession.day, ClassSession.start_slot_index, ClassSession.id)
    )
    return list(db.execute(query).scalars())

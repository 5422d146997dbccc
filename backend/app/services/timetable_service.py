from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.core.exceptions import ResourceNotFoundError
from app.models.class_session import ClassSession
from app.models.group import StudentGroup
from app.models.room import Room
from app.models.subject import Subject
from app.models.teacher import Teacher
from app.models.timetable import Timetable
from app.schemas.timetable import SessionDetailOut, SessionOut, TimetableDetailOut
from app.services import entity_store
from app.services.slot_calendar import DAYS, slot_bounds

logger = logging.getLogger(__name__)


def session_out(db: Session, session: ClassSession) -> SessionOut:
    group_ids = entity_store.session_group_ids(db, [session.id]).get(session.id, [])
    return SessionOut(
        id=session.id,
        week_ref=session.week_ref,
        subject_id=session.subject_id,
        teacher_id=session.teacher_id,
        room_id=session.room_id,
        group_ids=group_ids,
        day=session.day,
        start_slot_index=session.start_slot_index,
        slot_count=session.slot_count,
        type=session.type,
    )


def _by_id(db: Session, model, ids: set[str]) -> dict:
    if not ids:
        return {}
    return {item.id: item for item in db.execute(select(model).where(model.id.in_(ids))).scalars()}


def describe_sessions(db: Session, session_ids: list[str]) -> list[SessionDetailOut]:
    if not session_ids:
        return []
    sessions = list(db.execute(select(ClassSession).where(ClassSession.id.in_(session_ids))).scalars())
    groups_by_session = entity_store.session_group_ids(db, [item.id for item in sessions])
    subjects = _by_id(db, Subject, {item.subject_id for item in sessions})
    teachers = _by_id(db, Teacher, {item.teacher_id for item in sessions})
    rooms = _by_id(db, Room, {item.room_id for item in sessions})
    groups = _by_id(db, StudentGroup, {gid for ids in groups_by_session.values() for gid in ids})

    details: list[SessionDetailOut] = []
    for session in sessions:
        subject = subjects.get(session.subject_id)
        teacher = teachers.get(session.teacher_id)
        room = rooms.get(session.room_id)
        group_ids = groups_by_session.get(session.id, [])
        start_time, end_time = slot_bounds(session.day, session.start_slot_index, session.slot_count)
        details.append(
            SessionDetailOut(
                id=session.id,
                week_ref=session.week_ref,
                subject_id=session.subject_id,
                teacher_id=session.teacher_id,
                room_id=session.room_id,
                group_ids=group_ids,
                day=session.day,
                start_slot_index=session.start_slot_index,
                slot_count=session.slot_count,
                type=session.type,
                subject_name=subject.name if subject else None,
                subject_code=subject.code if subject else None,
                teacher_name=teacher.name if teacher else None,
                room_name=room.name if room else None,
                room_capacity=room.capacity if room else None,
                group_names=[groups[gid].name for gid in group_ids if gid in groups],
                start_time=start_time,
                end_time=end_time,
            )
        )
    details.sort(key=lambda item: (DAYS.index(item.day), item.start_slot_index, item.id))
    return details


def timetable_detail(db: Session, timetable: Timetable) -> TimetableDetailOut:
    group = db.get(StudentGroup, timetable.group_id)
    return TimetableDetailOut(
        id=timetable.id,
        group_id=timetable.group_id,
        week_ref=timetable.week_ref,
        session_ids=list(timetable.session_ids or []),
        updated_at=timetable.updated_at,
        group_name=group.name if group else None,
        sessions=describe_sessions(db, list(timetable.session_ids or [])),
    )


def get_timetable(db: Session, group_id: str, week_ref: str) -> TimetableDetailOut:
    timetable = entity_store.find_timetable(db, group_id, week_ref)
    if timetable is None:
        raise ResourceNotFoundError("Timetable", f"{group_id}/{week_ref}")
    return timetable_detail(db, timetable)


def list_week(db: Session, week_ref: str) -> list[TimetableDetailOut]:
    timetables = db.execute(
        select(Timetable).where(Timetable.week_ref == week_ref).order_by(Timetable.group_id)
    ).scalars()
    return [timetable_detail(db, item) for item in timetables]


def delete_timetable(db: Session, group_id: str, week_ref: str) -> int:
    timetable = entity_store.find_timetable(db, group_id, week_ref)
    if timetable is None:
        raise ResourceNotFoundError("Timetable", f"{group_id}/{week_ref}")
    removed = entity_store.delete_sessions(db, list(timetable.session_ids or []))
    db.execute(delete(Timetable).where(Timetable.id == timetable.id))
    db.commit()
    logger.info("Deleted timetable %s/%s with %s sessions", group_id, week_ref, removed)
    return removed

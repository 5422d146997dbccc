import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.models.group import StudentGroup
from app.models.subject import Subject, SubjectGroup
from app.models.teacher import Teacher
from app.schemas.subject import SubjectBase, SubjectCreate, SubjectOut, SubjectUpdate
from app.services import entity_store
from app.services.slot_calendar import weekly_slot_count

router = APIRouter()
logger = logging.getLogger(__name__)


def _subject_out(subject: Subject, group_ids: list[str]) -> SubjectOut:
    return SubjectOut(
        id=subject.id,
        name=subject.name,
        code=subject.code,
        weekly_hours=subject.weekly_hours,
        type=subject.type,
        slots_per_session=subject.slots_per_session,
        teacher_id=subject.teacher_id,
        group_ids=group_ids,
        weekly_slots=subject.weekly_slots,
    )


def _get_subject_or_404(db: Session, subject_id: str) -> Subject:
    subject = db.get(Subject, subject_id)
    if subject is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subject not found")
    return subject


def _ensure_references(db: Session, teacher_id: str, group_ids: list[str]) -> None:
    if db.get(Teacher, teacher_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Teacher not found")
    known = set(
        db.execute(select(StudentGroup.id).where(StudentGroup.id.in_(group_ids))).scalars()
    )
    missing = [group_id for group_id in group_ids if group_id not in known]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown groups: {', '.join(missing)}",
        )


def _ensure_unique_code(db: Session, code: str, subject_id: str | None = None) -> None:
    query = select(Subject).where(Subject.code == code)
    if subject_id is not None:
        query = query.where(Subject.id != subject_id)
    if db.execute(query).scalar_one_or_none():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Subject code already exists")


@router.get("/", response_model=list[SubjectOut])
def list_subjects(db: Session = Depends(get_db)) -> list[SubjectOut]:
    subjects = list(db.execute(select(Subject).order_by(Subject.code, Subject.id)).scalars())
    groups_by_subject = entity_store.subject_group_ids(db, [item.id for item in subjects])
    return [_subject_out(item, groups_by_subject.get(item.id, [])) for item in subjects]


@router.get("/{subject_id}", response_model=SubjectOut)
def get_subject(subject_id: str, db: Session = Depends(get_db)) -> SubjectOut:
    subject = _get_subject_or_404(db, subject_id)
    return _subject_out(subject, entity_store.subject_group_ids(db, [subject.id]).get(subject.id, []))


@router.post("/", response_model=SubjectOut, status_code=status.HTTP_201_CREATED)
def create_subject(payload: SubjectCreate, db: Session = Depends(get_db)) -> SubjectOut:
    _ensure_unique_code(db, payload.code)
    _ensure_references(db, payload.teacher_id, payload.group_ids)

    data = payload.model_dump(exclude={"group_ids"})
    subject = Subject(**data, weekly_slots=weekly_slot_count(payload.weekly_hours))
    db.add(subject)
    db.flush()
    entity_store.replace_subject_groups(db, subject.id, payload.group_ids)
    db.commit()
    db.refresh(subject)
    logger.info(
        "Subject created | id=%s code=%s type=%s weekly_hours=%s",
        subject.id,
        subject.code,
        subject.type.value,
        subject.weekly_hours,
    )
    return _subject_out(subject, payload.group_ids)


@router.put("/{subject_id}", response_model=SubjectOut)
def update_subject(subject_id: str, payload: SubjectUpdate, db: Session = Depends(get_db)) -> SubjectOut:
    subject = _get_subject_or_404(db, subject_id)
    current_groups = entity_store.subject_group_ids(db, [subject.id]).get(subject.id, [])

    merged = {
        "name": subject.name,
        "code": subject.code,
        "weekly_hours": subject.weekly_hours,
        "type": subject.type,
        "slots_per_session": subject.slots_per_session,
        "teacher_id": subject.teacher_id,
        "group_ids": current_groups,
    }
    merged.update(payload.model_dump(exclude_unset=True, exclude_none=True))
    try:
        updated = SubjectBase.model_validate(merged)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.errors(include_url=False, include_context=False),
        ) from exc

    _ensure_unique_code(db, updated.code, subject_id)
    _ensure_references(db, updated.teacher_id, updated.group_ids)

    for key, value in updated.model_dump(exclude={"group_ids"}).items():
        setattr(subject, key, value)
    subject.weekly_slots = weekly_slot_count(updated.weekly_hours)
    if updated.group_ids != current_groups:
        entity_store.replace_subject_groups(db, subject.id, updated.group_ids)
    db.commit()
    db.refresh(subject)
    return _subject_out(subject, updated.group_ids)


@router.delete("/{subject_id}")
def delete_subject(subject_id: str, db: Session = Depends(get_db)) -> dict:
    subject = _get_subject_or_404(db, subject_id)
    db.execute(delete(SubjectGroup).where(SubjectGroup.subject_id == subject_id))
    db.delete(subject)
    db.commit()
    logger.info("Subject deleted | id=%s", subject_id)
    return {"success": True}

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.models.teacher import Teacher
from app.schemas.teacher import (
    TeacherCreate,
    TeacherOut,
    TeacherPreferencesOut,
    TeacherPreferencesUpdate,
    TeacherUpdate,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _get_teacher_or_404(db: Session, teacher_id: str) -> Teacher:
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Teacher not found")
    return teacher


@router.get("/", response_model=list[TeacherOut])
def list_teachers(db: Session = Depends(get_db)) -> list[TeacherOut]:
    return list(db.execute(select(Teacher).order_by(Teacher.name)).scalars())


@router.get("/{teacher_id}", response_model=TeacherOut)
def get_teacher(teacher_id: str, db: Session = Depends(get_db)) -> TeacherOut:
    return _get_teacher_or_404(db, teacher_id)


@router.post("/", response_model=TeacherOut, status_code=status.HTTP_201_CREATED)
def create_teacher(payload: TeacherCreate, db: Session = Depends(get_db)) -> TeacherOut:
    email = payload.email.lower()
    existing = db.execute(select(Teacher).where(Teacher.email == email)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Teacher email already exists")
    data = payload.model_dump(mode="json")
    data["email"] = email
    teacher = Teacher(**data)
    db.add(teacher)
    db.commit()
    db.refresh(teacher)
    logger.info("Teacher created | id=%s email=%s", teacher.id, teacher.email)
    return teacher


@router.put("/{teacher_id}", response_model=TeacherOut)
def update_teacher(teacher_id: str, payload: TeacherUpdate, db: Session = Depends(get_db)) -> TeacherOut:
    teacher = _get_teacher_or_404(db, teacher_id)

    data = payload.model_dump(exclude_unset=True, mode="json")
    if "email" in data:
        data["email"] = data["email"].lower()
        existing = db.execute(
            select(Teacher).where(Teacher.email == data["email"], Teacher.id != teacher_id)
        ).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Teacher email already exists")

    for key, value in data.items():
        setattr(teacher, key, value)
    db.commit()
    db.refresh(teacher)
    return teacher


@router.delete("/{teacher_id}")
def delete_teacher(teacher_id: str, db: Session = Depends(get_db)) -> dict:
    teacher = _get_teacher_or_404(db, teacher_id)
    db.delete(teacher)
    db.commit()
    logger.info("Teacher deleted | id=%s", teacher_id)
    return {"success": True}


@router.get("/{teacher_id}/preferences", response_model=TeacherPreferencesOut)
def get_teacher_preferences(teacher_id: str, db: Session = Depends(get_db)) -> TeacherPreferencesOut:
    teacher = _get_teacher_or_404(db, teacher_id)
    return TeacherPreferencesOut(
        teacher_id=teacher.id,
        name=teacher.name,
        availability=teacher.availability,
        preferences=teacher.preferences,
    )


@router.put("/{teacher_id}/preferences", response_model=TeacherPreferencesOut)
def update_teacher_preferences(
    teacher_id: str,
    payload: TeacherPreferencesUpdate,
    db: Session = Depends(get_db),
) -> TeacherPreferencesOut:
    teacher = _get_teacher_or_404(db, teacher_id)
    if payload.availability is not None:
        teacher.availability = payload.availability.model_dump(mode="json")
    if payload.preferences is not None:
        teacher.preferences = payload.preferences.model_dump(mode="json")
    db.commit()
    db.refresh(teacher)
    logger.info("Teacher preferences updated | id=%s", teacher_id)
    return TeacherPreferencesOut(
        teacher_id=teacher.id,
        name=teacher.name,
        availability=teacher.availability,
        preferences=teacher.preferences,
    )

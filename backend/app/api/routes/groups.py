import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.models.group import StudentGroup
from app.schemas.group import GroupCreate, GroupOut, GroupUpdate

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/", response_model=list[GroupOut])
def list_groups(db: Session = Depends(get_db)) -> list[GroupOut]:
    return list(db.execute(select(StudentGroup).order_by(StudentGroup.name)).scalars())


@router.get("/{group_id}", response_model=GroupOut)
def get_group(group_id: str, db: Session = Depends(get_db)) -> GroupOut:
    group = db.get(StudentGroup, group_id)
    if group is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Group not found")
    return group


@router.post("/", response_model=GroupOut, status_code=status.HTTP_201_CREATED)
def create_group(payload: GroupCreate, db: Session = Depends(get_db)) -> GroupOut:
    existing = db.execute(select(StudentGroup).where(StudentGroup.name == payload.name)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Group name already exists")
    group = StudentGroup(**payload.model_dump())
    db.add(group)
    db.commit()
    db.refresh(group)
    logger.info("Group created | id=%s name=%s size=%s", group.id, group.name, group.size)
    return group


@router.put("/{group_id}", response_model=GroupOut)
def update_group(group_id: str, payload: GroupUpdate, db: Session = Depends(get_db)) -> GroupOut:
    group = db.get(StudentGroup, group_id)
    if group is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Group not found")

    data = payload.model_dump(exclude_unset=True)
    if "name" in data:
        existing = db.execute(
            select(StudentGroup).where(StudentGroup.name == data["name"], StudentGroup.id != group_id)
        ).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Group name already exists")

    for key, value in data.items():
        setattr(group, key, value)
    db.commit()
    db.refresh(group)
    return group


@router.delete("/{group_id}")
def delete_group(group_id: str, db: Session = Depends(get_db)) -> dict:
    group = db.get(StudentGroup, group_id)
    if group is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Group not found")
    db.delete(group)
    db.commit()
    logger.info("Group deleted | id=%s", group_id)
    return {"success": True}

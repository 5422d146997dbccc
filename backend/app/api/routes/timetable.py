import logging

from fastapi import APIRouter, Body, Depends, Path, Query
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.core.exceptions import AppError, ResourceNotFoundError
from app.schemas.generator import GenerateTimetableResponse, GenerationScope, Rounding, ScoringWeights
from app.schemas.session import SessionCheckResponse, SessionMoveRequest, SessionPlacement
from app.schemas.timetable import WEEK_REF_PATTERN, SessionOut, TimetableDetailOut
from app.services import entity_store, timetable_service
from app.services.scheduler import TimetableScheduler
from app.services.session_validation import check_conflicts, move_session, validate_session

router = APIRouter()
logger = logging.getLogger(__name__)

WEEK_QUERY_PATTERN = WEEK_REF_PATTERN.pattern


@router.post("/generate", response_model=GenerateTimetableResponse)
def generate(
    week: str = Query(..., pattern=WEEK_QUERY_PATTERN, description="ISO week, e.g. 2024-W42"),
    scope: GenerationScope = Query(default="all"),
    group_id: str | None = Query(default=None, max_length=36),
    rounding: Rounding | None = Query(default=None),
    weights: ScoringWeights | None = Body(default=None),
    db: Session = Depends(get_db),
) -> GenerateTimetableResponse:
    scheduler = TimetableScheduler(
        db=db,
        week_ref=week,
        scope=scope,
        group_id=group_id,
        rounding=rounding,
        weights=weights,
    )
    try:
        return scheduler.run()
    except AppError:
        raise
    except Exception:
        logger.exception("Timetable generation failed | week=%s scope=%s group_id=%s", week, scope, group_id)
        raise


@router.post("/validate", response_model=SessionCheckResponse)
def validate(
    payload: SessionPlacement,
    exclude_session_id: str | None = Query(default=None, max_length=36),
    db: Session = Depends(get_db),
) -> SessionCheckResponse:
    result = validate_session(db, payload)
    conflicts = check_conflicts(db, payload, exclude_session_id=exclude_session_id)
    return SessionCheckResponse(
        valid=result.valid and not conflicts,
        errors=result.errors,
        conflicts=[item.to_out() for item in conflicts],
    )


@router.get("/week/{week}", response_model=list[TimetableDetailOut])
def list_week(
    week: str = Path(..., pattern=WEEK_QUERY_PATTERN),
    db: Session = Depends(get_db),
) -> list[TimetableDetailOut]:
    return timetable_service.list_week(db, week)


@router.get("/{group_id}/{week}", response_model=TimetableDetailOut)
def get_timetable(
    group_id: str,
    week: str = Path(..., pattern=WEEK_QUERY_PATTERN),
    db: Session = Depends(get_db),
) -> TimetableDetailOut:
    return timetable_service.get_timetable(db, group_id, week)


@router.put("/{group_id}/{week}/session/{session_id}", response_model=SessionOut)
def update_session(
    group_id: str,
    session_id: str,
    payload: SessionMoveRequest,
    week: str = Path(..., pattern=WEEK_QUERY_PATTERN),
    db: Session = Depends(get_db),
) -> SessionOut:
    timetable = entity_store.find_timetable(db, group_id, week)
    if timetable is None or session_id not in (timetable.session_ids or []):
        raise ResourceNotFoundError("Session", session_id)
    session = move_session(db, session_id, payload)
    logger.info(
        "Session moved | id=%s day=%s slot=%s room=%s",
        session.id,
        session.day,
        session.start_slot_index,
        session.room_id,
    )
    return timetable_service.session_out(db, session)


@router.delete("/{group_id}/{week}")
def delete_timetable(
    group_id: str,
    week: str = Path(..., pattern=WEEK_QUERY_PATTERN),
    db: Session = Depends(get_db),
) -> dict:
    removed = timetable_service.delete_timetable(db, group_id, week)
    return {"success": True, "deleted_sessions": removed}

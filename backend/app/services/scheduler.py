from __future__ import annotations

import logging
from contextlib import ExitStack
from dataclasses import dataclass, field
from time import perf_counter

from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.exceptions import PreconditionFailure, SchedulerError
from app.models.class_session import ClassSession
from app.models.timetable import Timetable
from app.schemas.generator import (
    GenerateTimetableResponse,
    GenerationScope,
    GenerationStats,
    Rounding,
    ScoringWeights,
    UnplacedDemandOut,
)
from app.schemas.timetable import TimetableOut, is_week_ref
from app.services import entity_store
from app.services.demand_builder import SessionDemand, build_session_demands, order_demands_by_difficulty
from app.services.generation_lease import GenerationLease, get_generation_lease
from app.services.occupancy import OccupancyIndex
from app.services.placement import find_best_placement

logger = logging.getLogger(__name__)


def default_scoring_weights() -> ScoringWeights:
    settings = get_settings()
    return ScoringWeights(
        teacher_preference=settings.scheduler_weight_teacher_preference,
        room_fit=settings.scheduler_weight_room_fit,
        balance=settings.scheduler_weight_balance,
    )


@dataclass
class PlacementRun:
    placed: list[tuple[ClassSession, SessionDemand]] = field(default_factory=list)
    unplaced: list[SessionDemand] = field(default_factory=list)
    occupancy: OccupancyIndex = field(default_factory=OccupancyIndex)


class TimetableScheduler:
    """Single-pass greedy timetable generation for one week.

    Demands are placed one at a time, hardest first, into the best scoring
    free (day, slot, room). Nothing already placed is revisited, so an
    instance may end with unplaced demands even when a full assignment
    exists.
    """

    def __init__(
        self,
        *,
        db: Session,
        week_ref: str,
        scope: GenerationScope = "all",
        group_id: str | None = None,
        rounding: Rounding | None = None,
        weights: ScoringWeights | None = None,
        lease: GenerationLease | None = None,
    ) -> None:
        if not is_week_ref(week_ref):
            raise SchedulerError("Invalid week format. Use YYYY-Www (e.g., 2024-W42)")
        if scope == "group" and not group_id:
            raise SchedulerError('group_id is required when scope is "group"')

        self.db = db
        self.week_ref = week_ref
        self.scope = scope
        self.group_id = group_id if scope == "group" else None
        self.rounding: Rounding = rounding or get_settings().scheduler_default_rounding
        self.weights = weights or default_scoring_weights()
        self.lease = lease or get_generation_lease()

    def run(self) -> GenerateTimetableResponse:
        started = perf_counter()
        logger.info(
            "Timetable generation started | week=%s scope=%s group_id=%s rounding=%s",
            self.week_ref,
            self.scope,
            self.group_id,
            self.rounding,
        )
        lease_groups = [self.group_id] if self.group_id else None
        with ExitStack() as stack:
            stack.enter_context(self.lease.hold(self.week_ref, lease_groups))
            subjects = entity_store.load_subject_specs(self.db, group_id=self.group_id)
            rooms = entity_store.load_rooms(self.db)
            if not subjects:
                raise PreconditionFailure("No subjects found", details={"scope": self.scope, "group_id": self.group_id})
            if not rooms:
                raise PreconditionFailure("No rooms available")

            teachers = entity_store.load_teachers(self.db, (subject.teacher_id for subject in subjects))
            groups = entity_store.load_groups(
                self.db, (group_id for subject in subjects for group_id in subject.group_ids)
            )
            target_group_ids = list(dict.fromkeys(
                group_id for subject in subjects for group_id in subject.group_ids if group_id in groups
            ))
            if self.group_id:
                # Shared subjects rewrite the timetables of their other groups too.
                shared = [group_id for group_id in target_group_ids if group_id != self.group_id]
                if shared:
                    stack.enter_context(self.lease.hold(self.week_ref, shared))

            demands = order_demands_by_difficulty(
                build_session_demands(subjects, teachers, groups, self.rounding)
            )

            occupancy = self._reserve_kept_sessions(target_group_ids)
            outcome = self._place_demands(demands, rooms, occupancy)
            # Placed sessions stay committed even if assembly fails afterwards.
            self.db.commit()
            timetables = self._assemble_timetables(outcome.placed, target_group_ids)
            self.db.commit()

        for timetable in timetables:
            self.db.refresh(timetable)

        logger.info(
            "Timetable generation finished | week=%s demands=%s placed=%s unplaced=%s duration=%.3fs",
            self.week_ref,
            len(demands),
            len(outcome.placed),
            len(outcome.unplaced),
            perf_counter() - started,
        )
        return GenerateTimetableResponse(
            success=True,
            week_ref=self.week_ref,
            scope=self.scope,
            timetables=[TimetableOut.model_validate(item) for item in timetables],
            stats=GenerationStats(
                total_demands=len(demands),
                placed_sessions=len(outcome.placed),
                unplaced_demands=len(outcome.unplaced),
            ),
            unplaced_demands=[
                UnplacedDemandOut(
                    subject=demand.subject_name,
                    type=demand.type,
                    groups=[group.name for group in demand.groups],
                )
                for demand in outcome.unplaced
            ],
        )

    def _reserve_kept_sessions(self, target_group_ids: list[str]) -> OccupancyIndex:
        """Occupancy of the week's sessions that this run leaves in place."""
        occupancy = OccupancyIndex()
        kept = entity_store.sessions_outside_groups(self.db, week_ref=self.week_ref, group_ids=target_group_ids)
        members = entity_store.session_group_ids(self.db, (session.id for session in kept))
        for session in kept:
            occupancy.reserve(
                teacher_id=session.teacher_id,
                group_ids=members.get(session.id, []),
                room_id=session.room_id,
                day=session.day,
                start_slot_index=session.start_slot_index,
                slot_count=session.slot_count,
                subject_id=session.subject_id,
            )
        if kept:
            logger.debug("Reserved %s sessions kept from week %s", len(kept), self.week_ref)
        return occupancy

    def _place_demands(
        self, demands: list[SessionDemand], rooms: list, occupancy: OccupancyIndex | None = None
    ) -> PlacementRun:
        outcome = PlacementRun(occupancy=occupancy or OccupancyIndex())
        for demand in demands:
            placement = find_best_placement(demand, rooms, outcome.occupancy, self.weights)
            if placement is None:
                logger.warning(
                    "No feasible placement | subject=%s type=%s groups=%s size=%s",
                    demand.subject_code,
                    demand.type,
                    ",".join(group.name for group in demand.groups),
                    demand.total_group_size,
                )
                outcome.unplaced.append(demand)
                continue

            session = entity_store.create_session(
                self.db,
                week_ref=self.week_ref,
                subject_id=demand.subject_id,
                teacher_id=demand.teacher_id,
                group_ids=demand.group_ids,
                room_id=placement.room.id,
                day=placement.day,
                start_slot_index=placement.start_slot_index,
                slot_count=demand.slots_per_session,
                session_type=demand.type,
            )
            outcome.occupancy.reserve(
                teacher_id=demand.teacher_id,
                group_ids=demand.group_ids,
                room_id=placement.room.id,
                day=placement.day,
                start_slot_index=placement.start_slot_index,
                slot_count=demand.slots_per_session,
                subject_id=demand.subject_id,
            )
            outcome.placed.append((session, demand))
            logger.debug(
                "Placed %s on %s slot %s in %s (score=%s)",
                demand.subject_code,
                placement.day,
                placement.start_slot_index,
                placement.room.name,
                placement.score,
            )
        return outcome

    def _assemble_timetables(
        self, placed: list[tuple[ClassSession, SessionDemand]], target_group_ids: list[str]
    ) -> list[Timetable]:
        # Every target group gets a record, even an empty one.
        sessions_by_group: dict[str, list[str]] = {group_id: [] for group_id in target_group_ids}
        for session, demand in placed:
            for group_id in demand.group_ids:
                sessions_by_group.setdefault(group_id, []).append(session.id)

        timetables: list[Timetable] = []
        superseded: set[str] = set()
        for group_id, session_ids in sessions_by_group.items():
            record, previous = entity_store.upsert_timetable(
                self.db, group_id=group_id, week_ref=self.week_ref, session_ids=session_ids
            )
            superseded.update(previous)
            timetables.append(record)

        removed = entity_store.prune_unreferenced_sessions(
            self.db, week_ref=self.week_ref, candidate_ids=superseded
        )
        if removed:
            logger.info("Removed %s superseded sessions for week %s", removed, self.week_ref)
        return timetables


def generate_timetable(
    db: Session,
    week_ref: str,
    scope: GenerationScope = "all",
    group_id: str | None = None,
    rounding: Rounding | None = None,
    weights: ScoringWeights | None = None,
) -> GenerateTimetableResponse:
    return TimetableScheduler(
        db=db,
        week_ref=week_ref,
        scope=scope,
        group_id=group_id,
        rounding=rounding,
        weights=weights,
    ).run()

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from app.models.teacher import PreferenceLevel
from app.schemas.generator import ScoringWeights
from app.services.demand_builder import SessionDemand
from app.services.occupancy import OccupancyIndex
from app.services.slot_calendar import DAYS, has_slot, period_of, periods_covered, slots_for

BALANCE_BASELINE = 5
TIGHT_FIT_SLACK = 10
LOOSE_FIT_SLACK = 30


@dataclass(frozen=True)
class Placement:
    day: str
    start_slot_index: int
    room: Any
    score: int


def teacher_available(teacher: Any, day: str, period: str) -> bool:
    return bool((teacher.availability or {}).get(day, {}).get(period, False))


def teacher_preference(teacher: Any, day: str, period: str) -> str:
    return (teacher.preferences or {}).get(day, {}).get(period, PreferenceLevel.neutral.value)


def room_allows(room: Any, session_type: str) -> bool:
    return session_type in (room.types_allowed or [])


def room_is_suitable(room: Any, demand: SessionDemand) -> bool:
    return room.capacity >= demand.total_group_size and room_allows(room, demand.type)


def score_placement(
    demand: SessionDemand,
    day: str,
    slot_index: int,
    room: Any,
    occupancy: OccupancyIndex,
    weights: ScoringWeights,
) -> int:
    score = 0

    preference = teacher_preference(demand.teacher, day, period_of(slot_index))
    if preference == PreferenceLevel.prefer.value:
        score += weights.teacher_preference * 10
    elif preference == PreferenceLevel.avoid.value:
        score -= weights.teacher_preference * 5

    slack = room.capacity - demand.total_group_size
    if slack < TIGHT_FIT_SLACK:
        score += weights.room_fit * 5
    elif slack < LOOSE_FIT_SLACK:
        score += weights.room_fit * 2

    score += weights.balance * (BALANCE_BASELINE - occupancy.placements_on(demand.subject_id, day))
    return score


def _people_free(demand: SessionDemand, day: str, slot_index: int, occupancy: OccupancyIndex) -> bool:
    count = demand.slots_per_session
    if not occupancy.range_is_free("teacher", demand.teacher_id, day, slot_index, count):
        return False
    return all(
        occupancy.range_is_free("group", group_id, day, slot_index, count)
        for group_id in demand.group_ids
    )


def find_best_placement(
    demand: SessionDemand,
    rooms: Sequence[Any],
    occupancy: OccupancyIndex,
    weights: ScoringWeights,
) -> Placement | None:
    """Return the highest scoring feasible (day, slot, room) for ``demand``.

    Days run Monday to Saturday, slots ascending and rooms in catalog order;
    on equal scores the first candidate in that order wins, which keeps runs
    reproducible. ``None`` means no candidate survived the hard constraints.
    """
    suitable_rooms = [room for room in rooms if room_is_suitable(room, demand)]
    best: Placement | None = None

    for day in DAYS:
        for slot in slots_for(day):
            slot_index = slot.index
            if demand.slots_per_session == 2 and not has_slot(day, slot_index + 1):
                continue
            periods = periods_covered(day, slot_index, demand.slots_per_session)
            if not all(teacher_available(demand.teacher, day, period) for period in periods):
                continue
            if not _people_free(demand, day, slot_index, occupancy):
                continue

            for room in suitable_rooms:
                if not occupancy.range_is_free("room", room.id, day, slot_index, demand.slots_per_session):
                    continue
                score = score_placement(demand, day, slot_index, room, occupancy, weights)
                if best is None or score > best.score:
                    best = Placement(day=day, start_slot_index=slot_index, room=room, score=score)

    return best

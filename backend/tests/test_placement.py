from types import SimpleNamespace

from app.schemas.generator import ScoringWeights
from app.services.demand_builder import SessionDemand
from app.services.occupancy import OccupancyIndex
from app.services.placement import find_best_placement, score_placement
from app.services.slot_calendar import DAYS, PERIODS

WEIGHTS = ScoringWeights()


def _availability(value=True, **overrides):
    availability = {day: {period: value for period in PERIODS} for day in DAYS}
    for key, flag in overrides.items():
        day, period = key.split("_")
        availability[day][period] = flag
    return availability


def _teacher(availability=None, preferences=None):
    return SimpleNamespace(
        id="t1",
        name="Teacher",
        availability=availability if availability is not None else _availability(),
        preferences=preferences or {},
    )


def _room(name, capacity=30, types=("CM", "TD", "TP")):
    return SimpleNamespace(id=f"room-{name}", name=name, capacity=capacity, types_allowed=list(types))


def _demand(teacher=None, *, size=25, type="CM", slots=1, subject_id="s1"):
    return SessionDemand(
        subject_id=subject_id,
        subject_name="Algebra",
        subject_code="ALG",
        teacher=teacher or _teacher(),
        groups=(SimpleNamespace(id="g1", name="G1", size=size),),
        type=type,
        slots_per_session=slots,
        total_group_size=size,
    )


def test_ties_keep_first_day_slot_and_room():
    placement = find_best_placement(_demand(), [_room("A"), _room("B")], OccupancyIndex(), WEIGHTS)

    assert placement is not None
    assert (placement.day, placement.start_slot_index, placement.room.name) == ("monday", 0, "A")
    # tight fit (+5) and untouched day (2 * 5)
    assert placement.score == 15


def test_preferred_period_wins():
    teacher = _teacher(preferences={"tuesday": {"afternoon": "prefer"}})

    placement = find_best_placement(_demand(teacher), [_room("A")], OccupancyIndex(), WEIGHTS)

    assert (placement.day, placement.start_slot_index) == ("tuesday", 3)
    assert placement.score == 45


def test_avoided_period_is_skipped_when_alternatives_exist():
    teacher = _teacher(preferences={"monday": {"morning": "avoid"}})

    placement = find_best_placement(_demand(teacher), [_room("A")], OccupancyIndex(), WEIGHTS)

    assert (placement.day, placement.start_slot_index) == ("monday", 3)


def test_tighter_room_scores_higher():
    rooms = [_room("A-hall", capacity=100), _room("B-small", capacity=30)]

    placement = find_best_placement(_demand(), rooms, OccupancyIndex(), WEIGHTS)

    assert placement.room.name == "B-small"
    assert score_placement(_demand(), "monday", 0, rooms[0], OccupancyIndex(), WEIGHTS) == 10


def test_balance_spreads_a_subject_across_days():
    occupancy = OccupancyIndex()
    for slot in (0, 1):
        occupancy.reserve(
            teacher_id="other",
            group_ids=["other"],
            room_id="other",
            day="monday",
            start_slot_index=slot,
            slot_count=1,
            subject_id="s1",
        )

    placement = find_best_placement(_demand(), [_room("A")], occupancy, WEIGHTS)

    assert (placement.day, placement.start_slot_index) == ("tuesday", 0)


def test_teacher_availability_is_a_hard_constraint():
    teacher = _teacher(_availability(False, saturday_afternoon=True))

    placement = find_best_placement(_demand(teacher), [_room("A")], OccupancyIndex(), WEIGHTS)

    assert (placement.day, placement.start_slot_index) == ("saturday", 3)


def test_busy_teacher_group_and_room_slots_are_skipped():
    occupancy = OccupancyIndex()
    occupancy.reserve(teacher_id="t1", group_ids=[], room_id="x", day="monday", start_slot_index=0, slot_count=1)
    occupancy.reserve(teacher_id="y", group_ids=["g1"], room_id="x", day="monday", start_slot_index=1, slot_count=1)
    occupancy.reserve(teacher_id="y", group_ids=[], room_id="room-A", day="monday", start_slot_index=2, slot_count=1)

    placement = find_best_placement(_demand(), [_room("A")], occupancy, WEIGHTS)

    assert (placement.day, placement.start_slot_index) == ("monday", 3)


def test_availability_covers_every_slot_of_a_long_session():
    teacher = _teacher(_availability(False, monday_morning=True))
    occupancy = OccupancyIndex()
    occupancy.reserve(teacher_id="t1", group_ids=[], room_id="x", day="monday", start_slot_index=1, slot_count=1)

    # slot 2 is still morning but its second slot falls in the afternoon
    assert find_best_placement(_demand(teacher, type="TP", slots=2), [_room("Lab")], occupancy, WEIGHTS) is None


def test_room_type_and_capacity_filter_candidates():
    rooms = [_room("A", capacity=200, types=("CM",)), _room("B", capacity=20, types=("TD",))]

    assert find_best_placement(_demand(type="TD", size=25), rooms, OccupancyIndex(), WEIGHTS) is None

    placement = find_best_placement(_demand(type="TD", size=20), rooms, OccupancyIndex(), WEIGHTS)
    assert placement.room.name == "B"


def test_wednesday_afternoon_is_never_used_even_if_teacher_is_available():
    teacher = _teacher(_availability(False, wednesday_morning=True, wednesday_afternoon=True))
    occupancy = OccupancyIndex()

    first = find_best_placement(_demand(teacher, type="TP", slots=2), [_room("Lab")], occupancy, WEIGHTS)
    assert (first.day, first.start_slot_index) == ("wednesday", 0)

    occupancy.reserve(
        teacher_id="t1",
        group_ids=["g1"],
        room_id="room-Lab",
        day="wednesday",
        start_slot_index=0,
        slot_count=2,
    )
    # slot 2 would need slot 3, which Wednesday does not have
    assert find_best_placement(_demand(teacher, type="TP", slots=2), [_room("Lab")], occupancy, WEIGHTS) is None

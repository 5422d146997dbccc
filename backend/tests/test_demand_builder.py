from types import SimpleNamespace

from app.services.demand_builder import (
    SubjectSpec,
    build_session_demands,
    occurrence_count,
    order_demands_by_difficulty,
)


def _teacher(teacher_id="t1"):
    return SimpleNamespace(id=teacher_id, name=teacher_id)


def _group(group_id, size):
    return SimpleNamespace(id=group_id, name=group_id.upper(), size=size)


def _subject(code, *, hours=1.5, type="CM", slots=1, teacher_id="t1", group_ids=("g1",)):
    return SubjectSpec(
        id=f"sub-{code}",
        name=code.title(),
        code=code,
        weekly_hours=hours,
        type=type,
        slots_per_session=slots,
        teacher_id=teacher_id,
        group_ids=tuple(group_ids),
    )


def test_lecture_of_four_and_a_half_hours_yields_three_demands():
    demands = build_session_demands(
        [_subject("ALG", hours=4.5)],
        {"t1": _teacher()},
        {"g1": _group("g1", 25)},
    )

    assert len(demands) == 3
    assert all(demand.slots_per_session == 1 for demand in demands)
    assert all(demand.total_group_size == 25 for demand in demands)


def test_practical_is_forced_to_two_slots_and_rounding_decides_remainder():
    subject = _subject("LAB", hours=4.5, type="TP", slots=1)
    teachers = {"t1": _teacher()}
    groups = {"g1": _group("g1", 15)}

    up = build_session_demands([subject], teachers, groups, rounding="up")
    down = build_session_demands([subject], teachers, groups, rounding="down")

    assert [demand.slots_per_session for demand in up] == [2, 2]
    assert [demand.slots_per_session for demand in down] == [2]


def test_occurrence_count_handles_exact_division():
    assert occurrence_count(4, 2, "up") == 2
    assert occurrence_count(4, 2, "down") == 2
    assert occurrence_count(3, 1, "down") == 3


def test_subjects_with_unknown_teacher_or_group_are_skipped():
    demands = build_session_demands(
        [
            _subject("NOT", teacher_id="ghost"),
            _subject("GRP", group_ids=("g1", "missing")),
            _subject("OK"),
        ],
        {"t1": _teacher()},
        {"g1": _group("g1", 20)},
    )

    assert [demand.subject_code for demand in demands] == ["OK"]


def test_shared_subject_sums_group_sizes():
    demands = build_session_demands(
        [_subject("AMPHI", group_ids=("g1", "g2"))],
        {"t1": _teacher()},
        {"g1": _group("g1", 20), "g2": _group("g2", 22)},
    )

    assert demands[0].total_group_size == 42
    assert demands[0].group_ids == ("g1", "g2")


def test_order_puts_long_then_large_then_practical_first():
    teachers = {"t1": _teacher()}
    groups = {"small": _group("small", 10), "big": _group("big", 40)}
    demands = build_session_demands(
        [
            _subject("CM-SMALL", group_ids=("small",)),
            _subject("TD-SMALL", type="TD", group_ids=("small",)),
            _subject("CM-BIG", group_ids=("big",)),
            _subject("TP-SMALL", hours=3.0, type="TP", group_ids=("small",)),
        ],
        teachers,
        groups,
    )

    ordered = order_demands_by_difficulty(demands)

    assert [demand.subject_code for demand in ordered] == ["TP-SMALL", "CM-BIG", "TD-SMALL", "CM-SMALL"]


def test_order_is_stable_for_equal_demands():
    teachers = {"t1": _teacher()}
    groups = {"g1": _group("g1", 20)}
    demands = build_session_demands(
        [_subject("B"), _subject("A"), _subject("C")],
        teachers,
        groups,
    )

    assert [demand.subject_code for demand in order_demands_by_difficulty(demands)] == ["B", "A", "C"]

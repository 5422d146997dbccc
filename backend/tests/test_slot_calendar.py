import pytest

from app.services.slot_calendar import (
    DAYS,
    fits,
    has_slot,
    period_of,
    periods_covered,
    slot_bounds,
    slots_for,
    weekly_slot_count,
)


def test_week_has_six_days_with_five_slots_except_wednesday():
    assert DAYS == ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday")
    for day in DAYS:
        expected = 3 if day == "wednesday" else 5
        assert len(slots_for(day)) == expected


def test_wednesday_has_no_afternoon_slots():
    assert has_slot("wednesday", 2)
    assert not has_slot("wednesday", 3)
    assert not has_slot("wednesday", 4)
    assert not fits("wednesday", 2, 2)
    assert fits("thursday", 2, 2)


def test_period_split_at_slot_three():
    assert [period_of(index) for index in range(5)] == [
        "morning",
        "morning",
        "morning",
        "afternoon",
        "afternoon",
    ]


def test_periods_covered_follow_existing_slots():
    assert periods_covered("monday", 0, 2) == ["morning"]
    assert periods_covered("monday", 2, 2) == ["morning", "afternoon"]
    assert periods_covered("wednesday", 2, 2) == ["morning"]
    assert periods_covered("friday", 4, 1) == ["afternoon"]


def test_slot_bounds_span_consecutive_slots():
    assert slot_bounds("monday", 0, 1) == ("08:15", "09:45")
    assert slot_bounds("friday", 3, 2) == ("15:00", "18:15")
    with pytest.raises(ValueError):
        slot_bounds("wednesday", 2, 2)


@pytest.mark.parametrize(
    ("hours", "expected"),
    [(1.5, 1), (2.0, 2), (3.0, 2), (4.5, 3), (6.0, 4), (7.5, 5)],
)
def test_weekly_slot_count_rounds_up(hours, expected):
    assert weekly_slot_count(hours) == expected

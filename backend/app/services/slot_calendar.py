"""Static weekly teaching grid.

Six teaching days with five 1.5-hour slots each: three in the morning and two
in the afternoon. Wednesday only has its morning slots.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

SLOT_DURATION_HOURS = 1.5
DAYS: tuple[str, ...] = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday")
PERIODS: tuple[str, ...] = ("morning", "afternoon")
RESTRICTED_DAY = "wednesday"
AFTERNOON_START_INDEX = 3


@dataclass(frozen=True)
class SlotTime:
    index: int
    start: str
    end: str


MORNING_SLOTS: tuple[SlotTime, ...] = (
    SlotTime(index=0, start="08:15", end="09:45"),
    SlotTime(index=1, start="10:00", end="11:30"),
    SlotTime(index=2, start="11:45", end="13:15"),
)

AFTERNOON_SLOTS: tuple[SlotTime, ...] = (
    SlotTime(index=3, start="15:00", end="16:30"),
    SlotTime(index=4, start="16:45", end="18:15"),
)

ALL_SLOTS: tuple[SlotTime, ...] = MORNING_SLOTS + AFTERNOON_SLOTS


def slots_for(day: str) -> tuple[SlotTime, ...]:
    if day == RESTRICTED_DAY:
        return MORNING_SLOTS
    return ALL_SLOTS


def period_of(slot_index: int) -> str:
    return "morning" if slot_index < AFTERNOON_START_INDEX else "afternoon"


def has_slot(day: str, slot_index: int) -> bool:
    return any(slot.index == slot_index for slot in slots_for(day))


def periods_covered(day: str, start_slot_index: int, slot_count: int) -> list[str]:
    """Periods touched by a session; the start period is always included."""
    periods = [period_of(start_slot_index)]
    for offset in range(1, slot_count):
        slot_index = start_slot_index + offset
        if has_slot(day, slot_index) and period_of(slot_index) not in periods:
            periods.append(period_of(slot_index))
    return periods


def fits(day: str, start_slot_index: int, slot_count: int) -> bool:
    return all(has_slot(day, start_slot_index + offset) for offset in range(slot_count))


def slot_bounds(day: str, start_slot_index: int, slot_count: int) -> tuple[str, str]:
    if not fits(day, start_slot_index, slot_count):
        raise ValueError(f"Slot range {start_slot_index}+{slot_count} does not exist on {day}")
    by_index = {slot.index: slot for slot in slots_for(day)}
    return by_index[start_slot_index].start, by_index[start_slot_index + slot_count - 1].end


def weekly_slot_count(weekly_hours: float) -> int:
    # Round first so 4.5 / 1.5 does not become 3.0000000000000004 and ceil to 4.
    return math.ceil(round(weekly_hours / SLOT_DURATION_HOURS, 9))

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from typing import Literal

ResourceKind = Literal["teacher", "group", "room"]
OccupancyKey = tuple[str, str, str, int]


class OccupancyIndex:
    """Slots taken during one generation run.

    Keys are ``(kind, resource_id, day, slot_index)``. The index also counts how
    many sessions of each subject were placed on each day, which feeds the
    balance term of the placement score. Build a fresh instance per run.
    """

    def __init__(self) -> None:
        self._taken: set[OccupancyKey] = set()
        self._day_usage: dict[str, dict[str, int]] = defaultdict(dict)

    def __len__(self) -> int:
        return len(self._taken)

    def __contains__(self, key: OccupancyKey) -> bool:
        return key in self._taken

    def is_free(self, kind: ResourceKind, resource_id: str, day: str, slot_index: int) -> bool:
        return (kind, resource_id, day, slot_index) not in self._taken

    def range_is_free(
        self,
        kind: ResourceKind,
        resource_id: str,
        day: str,
        start_slot_index: int,
        slot_count: int,
    ) -> bool:
        return all(
            self.is_free(kind, resource_id, day, start_slot_index + offset)
            for offset in range(slot_count)
        )

    def reserve(
        self,
        *,
        teacher_id: str,
        group_ids: Iterable[str],
        room_id: str,
        day: str,
        start_slot_index: int,
        slot_count: int,
        subject_id: str | None = None,
    ) -> None:
        group_ids = tuple(group_ids)
        for offset in range(slot_count):
            slot_index = start_slot_index + offset
            self._taken.add(("teacher", teacher_id, day, slot_index))
            for group_id in group_ids:
                self._taken.add(("group", group_id, day, slot_index))
            self._taken.add(("room", room_id, day, slot_index))
        if subject_id is not None:
            usage = self._day_usage[subject_id]
            usage[day] = usage.get(day, 0) + 1

    def placements_on(self, subject_id: str, day: str) -> int:
        return self._day_usage.get(subject_id, {}).get(day, 0)

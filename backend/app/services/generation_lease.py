from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from threading import Lock

from app.core.exceptions import GenerationInProgressError

ALL_GROUPS = "*"


class GenerationLease:
    """Exclusive in-process lease over (group set, week).

    A whole-week holder excludes every other holder of that week; group-scoped
    holders only exclude each other when they share a group. This guards one
    process only; several workers against one database still need a lock in
    the database itself.
    """

    def __init__(self) -> None:
        self._held: dict[str, list[frozenset[str]]] = defaultdict(list)
        self._lock = Lock()

    @staticmethod
    def _overlaps(left: frozenset[str], right: frozenset[str]) -> bool:
        if ALL_GROUPS in left or ALL_GROUPS in right:
            return True
        return bool(left & right)

    @staticmethod
    def _describe(groups: frozenset[str]) -> str:
        if ALL_GROUPS in groups:
            return "all groups"
        return "groups " + ", ".join(sorted(groups))

    def acquire(self, week_ref: str, group_ids: Iterable[str] | None) -> frozenset[str]:
        groups = frozenset(group_ids) if group_ids is not None else frozenset({ALL_GROUPS})
        with self._lock:
            if any(self._overlaps(groups, held) for held in self._held[week_ref]):
                raise GenerationInProgressError(week_ref, self._describe(groups))
            self._held[week_ref].append(groups)
        return groups

    def release(self, week_ref: str, groups: frozenset[str]) -> None:
        with self._lock:
            held = self._held.get(week_ref, [])
            if groups in held:
                held.remove(groups)
            if not held:
                self._held.pop(week_ref, None)

    @contextmanager
    def hold(self, week_ref: str, group_ids: Iterable[str] | None = None) -> Iterator[None]:
        groups = self.acquire(week_ref, group_ids)
        try:
            yield
        finally:
            self.release(week_ref, groups)

    def clear(self) -> None:
        with self._lock:
            self._held.clear()


_lease = GenerationLease()


def get_generation_lease() -> GenerationLease:
    return _lease


def clear_generation_lease() -> None:
    _lease.clear()

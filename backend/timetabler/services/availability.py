from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Assignment:
    group_id: int
    day: str
    slot: int
    subject_id: int
    faculty_id: int
    room_id: int


class AvailabilityOracle:
    """Busy sets for faculty, rooms and student groups within one run.

    Occupation is monotonic: nothing is ever released during a run.
    """

    def __init__(self, assignments: Iterable[Assignment] = ()) -> None:
        self._faculty_busy: set[tuple[int, str, int]] = set()
        self._room_busy: set[tuple[int, str, int]] = set()
        self._group_busy: set[tuple[int, str, int]] = set()
        for assignment in assignments:
            self.occupy(assignment)

    def faculty_free(self, faculty_id: int, day: str, slot: int) -> bool:
        return (faculty_id, day, slot) not in self._faculty_busy

    def room_free(self, room_id: int, day: str, slot: int) -> bool:
        return (room_id, day, slot) not in self._room_busy

    def group_free(self, group_id: int, day: str, slot: int) -> bool:
        return (group_id, day, slot) not in self._group_busy

    def faculty_free_for(self, faculty_id: int, day: str, block: Iterable[int]) -> bool:
        return all(self.faculty_free(faculty_id, day, slot) for slot in block)

    def room_free_for(self, room_id: int, day: str, block: Iterable[int]) -> bool:
        return all(self.room_free(room_id, day, slot) for slot in block)

    def group_free_for(self, group_id: int, day: str, block: Iterable[int]) -> bool:
        return all(self.group_free(group_id, day, slot) for slot in block)

    def occupy(self, assignment: Assignment) -> None:
        self._faculty_busy.add((assignment.faculty_id, assignment.day, assignment.slot))
        self._room_busy.add((assignment.room_id, assignment.day, assignment.slot))
        self._group_busy.add((assignment.group_id, assignment.day, assignment.slot))

from __future__ import annotations

from collections import Counter, defaultdict
import logging
import math
import random
from dataclasses import dataclass, field
from typing import Callable, Protocol

from timetabler.schemas.calendar import CalendarConfigBase
from timetabler.schemas.generator import UnplacedReason, UnplacedUnit
from timetabler.services.availability import Assignment, AvailabilityOracle
from timetabler.services.catalog import CatalogIndex
from timetabler.services.requirements import TeachingUnit

logger = logging.getLogger(__name__)


class GroupLike(Protocol):
    id: int
    size: int
    department_id: int


@dataclass
class RunContext:
    """Mutable state owned by a single generation run."""

    oracle: AvailabilityOracle = field(default_factory=AvailabilityOracle)
    faculty_load: Counter = field(default_factory=Counter)
    group_day_load: dict[int, Counter] = field(default_factory=lambda: defaultdict(Counter))
    assignments: list[Assignment] = field(default_factory=list)
    unplaced: list[UnplacedUnit] = field(default_factory=list)
    sink: Callable[[Assignment], None] | None = None

    def commit(self, assignment: Assignment) -> None:
        self.oracle.occupy(assignment)
        self.faculty_load[assignment.faculty_id] += 1
        self.assignments.append(assignment)
        if self.sink is not None:
            self.sink(assignment)


class GreedyPlacer:
    """First-fit placement of teaching units over a shuffled day/slot search.

    Committed assignments are never revisited, so the order of the unit list
    decides which unit wins a contested slot.
    """

    def __init__(self, *, calendar: CalendarConfigBase, catalog: CatalogIndex, rng: random.Random) -> None:
        self.calendar = calendar
        self.catalog = catalog
        self.random = rng
        self.days = calendar.days

    def day_load_cap(self, total_credits: int) -> int:
        return math.ceil(total_credits / len(self.days)) + 1

    def place(
        self,
        units: list[TeachingUnit],
        group: GroupLike,
        context: RunContext,
        *,
        day_load_cap: int,
    ) -> int:
        placed = 0
        for unit in units:
            reason = self._place_unit(unit, group, context, day_load_cap)
            if reason is None:
                placed += 1
                continue
            logger.debug(
                "Unit %s (length %s) for group %s not placed: %s",
                unit.subject_code,
                unit.length,
                group.id,
                reason,
            )
            context.unplaced.append(
                UnplacedUnit(
                    division_id=group.id,
                    subject_id=unit.subject_id,
                    subject_code=unit.subject_code,
                    length=unit.length,
                    reason=reason,
                )
            )
        return placed

    def _candidate_days(self) -> list[str]:
        days = list(self.days)
        self.random.shuffle(days)
        return days

    def _candidate_starts(self, length: int) -> list[int]:
        starts = list(range(1, self.calendar.num_daily_slots - length + 2))
        self.random.shuffle(starts)
        return starts

    def _place_unit(
        self,
        unit: TeachingUnit,
        group: GroupLike,
        context: RunContext,
        day_load_cap: int,
    ) -> UnplacedReason | None:
        faculty = self.catalog.faculty_for(unit.subject_id)
        if not faculty:
            return "no_eligible_faculty"
        rooms = self.catalog.rooms_for(group.department_id, unit.is_lab, group.size)
        if not rooms:
            return "no_eligible_room"

        day_load = context.group_day_load[group.id]
        for day in self._candidate_days():
            if day_load[day] + unit.length > day_load_cap:
                continue
            for start in self._candidate_starts(unit.length):
                block = range(start, start + unit.length)
                if not context.oracle.group_free_for(group.id, day, block):
                    continue

                faculty_id = self._select_faculty(faculty, day, block, context)
                if faculty_id is None:
                    continue
                room_id = self._select_room(rooms, day, block, context)
                if room_id is None:
                    continue

                for slot in block:
                    context.commit(
                        Assignment(
                            group_id=group.id,
                            day=day,
                            slot=slot,
                            subject_id=unit.subject_id,
                            faculty_id=faculty_id,
                            room_id=room_id,
                        )
                    )
                day_load[day] += unit.length
                return None
        return "no_feasible_slot"

    @staticmethod
    def _select_faculty(candidates: list, day: str, block: range, context: RunContext) -> int | None:
        # Lowest run-wide load wins; the first candidate evaluated keeps ties.
        best_id: int | None = None
        best_load: int | None = None
        for member in candidates:
            load = context.faculty_load[member.id]
            if best_load is not None and load >= best_load:
                continue
            if context.oracle.faculty_free_for(member.id, day, block):
                best_id, best_load = member.id, load
        return best_id

    @staticmethod
    def _select_room(candidates: list, day: str, block: range, context: RunContext) -> int | None:
        for room in candidates:
            if context.oracle.room_free_for(room.id, day, block):
                return room.id
        return None

from __future__ import annotations

import logging

from sqlalchemy import case, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from timetabler.core.exceptions import TimetablePersistenceError
from timetabler.models.department import Department
from timetabler.models.division import Division
from timetabler.models.faculty import Faculty
from timetabler.models.room import Room
from timetabler.models.semester import Semester
from timetabler.models.subject import Subject
from timetabler.models.timetable import TimetableEntry
from timetabler.schemas.calendar import WEEKDAY_NAMES, CalendarConfigBase
from timetabler.schemas.timetable import DivisionGridOut, GridCell, TimetableEntryOut
from timetabler.services.availability import Assignment

logger = logging.getLogger(__name__)

DAY_ORDER = case(
    {name: index for index, name in enumerate(WEEKDAY_NAMES)},
    value=TimetableEntry.day,
    else_=len(WEEKDAY_NAMES),
)


class TimetableStore:
    """Persistence boundary for committed assignments.

    Nothing here commits the session; callers decide the transaction scope.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def reset(self) -> int:
        try:
            result = self.db.execute(delete(TimetableEntry))
        except SQLAlchemyError as exc:
            raise TimetablePersistenceError("Failed to clear existing timetable entries") from exc
        deleted = result.rowcount or 0
        logger.info("Cleared %s timetable entries", deleted)
        return deleted

    def commit(self, assignment: Assignment) -> None:
        self.db.add(
            TimetableEntry(
                division_id=assignment.group_id,
                day=assignment.day,
                slot=assignment.slot,
                subject_id=assignment.subject_id,
                faculty_id=assignment.faculty_id,
                room_id=assignment.room_id,
            )
        )

    def flush(self) -> None:
        try:
            self.db.flush()
        except SQLAlchemyError as exc:
            raise TimetablePersistenceError(
                "Failed to write timetable entries",
                details={"error": str(exc)},
            ) from exc

    def entries(self) -> list[TimetableEntry]:
        return list(
            self.db.execute(
                select(TimetableEntry).order_by(TimetableEntry.division_id, DAY_ORDER, TimetableEntry.slot)
            ).scalars()
        )

    def list_entries(
        self,
        *,
        division_id: int | None = None,
        faculty_id: int | None = None,
    ) -> list[TimetableEntryOut]:
        stmt = (
            select(
                TimetableEntry,
                Subject.code,
                Subject.name,
                Faculty.name,
                Room.room_number,
                Division.name,
                Semester.name,
                Department.name,
            )
            .join(Subject, TimetableEntry.subject_id == Subject.id)
            .join(Faculty, TimetableEntry.faculty_id == Faculty.id)
            .join(Room, TimetableEntry.room_id == Room.id)
            .join(Division, TimetableEntry.division_id == Division.id)
            .join(Semester, Division.semester_id == Semester.id)
            .join(Department, Semester.department_id == Department.id)
        )
        if division_id is not None:
            stmt = stmt.where(TimetableEntry.division_id == division_id)
        if faculty_id is not None:
            stmt = stmt.where(TimetableEntry.faculty_id == faculty_id)
        stmt = stmt.order_by(
            Department.name,
            Semester.semester_no,
            Division.name,
            DAY_ORDER,
            TimetableEntry.slot,
        )

        rows = []
        for entry, subject_code, subject_name, faculty_name, room_number, division_name, semester_name, department_name in self.db.execute(stmt):
            rows.append(
                TimetableEntryOut(
                    id=entry.id,
                    division_id=entry.division_id,
                    day=entry.day,
                    slot=entry.slot,
                    subject_id=entry.subject_id,
                    faculty_id=entry.faculty_id,
                    room_id=entry.room_id,
                    subject_code=subject_code,
                    subject_name=subject_name,
                    faculty_name=faculty_name,
                    room_number=room_number,
                    division_name=division_name,
                    semester_name=semester_name,
                    department_name=department_name,
                )
            )
        return rows

    def division_grid(self, division_id: int, calendar: CalendarConfigBase) -> DivisionGridOut:
        schedule: dict[int, dict[str, GridCell]] = {}
        for row in self.list_entries(division_id=division_id):
            schedule.setdefault(row.slot, {})[row.day] = GridCell(
                subject_code=row.subject_code,
                subject_name=row.subject_name,
                faculty_name=row.faculty_name,
                room_number=row.room_number,
            )
        return DivisionGridOut(
            division_id=division_id,
            days=calendar.days,
            max_slots=calendar.num_daily_slots,
            schedule=schedule,
        )

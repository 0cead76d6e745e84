from __future__ import annotations

from collections import defaultdict
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from timetabler.models.division import Division
from timetabler.models.faculty import Faculty
from timetabler.models.room import Room, RoomType
from timetabler.models.semester import Semester
from timetabler.models.subject import Subject


def list_subjects(db: Session, semester_id: int) -> list[Subject]:
    return list(
        db.execute(select(Subject).where(Subject.semester_id == semester_id).order_by(Subject.id)).scalars()
    )


def list_faculty(db: Session) -> list[Faculty]:
    return list(db.execute(select(Faculty).options(selectinload(Faculty.subjects)).order_by(Faculty.id)).scalars())


def list_rooms(db: Session) -> list[Room]:
    return list(db.execute(select(Room).order_by(Room.capacity, Room.room_number)).scalars())


def list_divisions(db: Session) -> list[Division]:
    stmt = (
        select(Division)
        .join(Semester, Division.semester_id == Semester.id)
        .options(selectinload(Division.semester))
        .order_by(Semester.department_id, Semester.semester_no, Division.name, Division.id)
    )
    return list(db.execute(stmt).scalars())


class CatalogIndex:
    """Read-only lookups the placer needs for every teaching unit."""

    def __init__(self, *, faculty: Iterable, rooms: Iterable) -> None:
        self.faculty = {member.id: member for member in sorted(faculty, key=lambda item: item.id)}
        self.rooms = {room.id: room for room in rooms}

        self._faculty_by_subject: dict[int, list] = defaultdict(list)
        for member in self.faculty.values():
            for subject_id in sorted(member.eligible_subject_ids):
                self._faculty_by_subject[subject_id].append(member)

        self._rooms_by_kind: dict[tuple[int, RoomType], list] = defaultdict(list)
        for room in sorted(self.rooms.values(), key=lambda item: (item.capacity, str(item.room_number), item.id)):
            self._rooms_by_kind[(room.department_id, RoomType(room.type))].append(room)

    def faculty_for(self, subject_id: int) -> list:
        return list(self._faculty_by_subject.get(subject_id, ()))

    def rooms_for(self, department_id: int, is_lab: bool, min_capacity: int) -> list:
        room_type = RoomType.lab if is_lab else RoomType.classroom
        return [room for room in self._rooms_by_kind.get((department_id, room_type), ()) if room.capacity >= min_capacity]


def load_catalog_index(db: Session) -> CatalogIndex:
    return CatalogIndex(faculty=list_faculty(db), rooms=list_rooms(db))

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class TimetableEntryOut(BaseModel):
    id: int
    division_id: int
    day: str
    slot: int
    subject_id: int
    faculty_id: int
    room_id: int
    subject_code: str
    subject_name: str
    faculty_name: str
    room_number: str
    division_name: str
    semester_name: str
    department_name: str


class GridCell(BaseModel):
    subject_code: str
    subject_name: str
    faculty_name: str
    room_number: str


class DivisionGridOut(BaseModel):
    division_id: int
    days: list[str]
    max_slots: int
    # schedule[slot][day]
    schedule: dict[int, dict[str, GridCell]]


class ResetTimetableResponse(BaseModel):
    success: bool = True
    deleted: int


class TimetableViolation(BaseModel):
    violation_type: Literal["faculty_clash", "room_clash", "group_clash", "room_capacity", "room_type"]
    day: str
    slot: int
    description: str
    entry_ids: list[int]

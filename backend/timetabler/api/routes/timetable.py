import logging

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from timetabler.api.deps import get_db
from timetabler.core.config import get_settings
from timetabler.core.exceptions import ResourceNotFoundError
from timetabler.models.division import Division
from timetabler.models.faculty import Faculty
from timetabler.models.room import Room
from timetabler.models.subject import Subject
from timetabler.schemas.generator import GenerateTimetableRequest, GenerationReport
from timetabler.schemas.timetable import (
    DivisionGridOut,
    ResetTimetableResponse,
    TimetableEntryOut,
    TimetableViolation,
)
from timetabler.services.calendar import load_calendar_config
from timetabler.services.generation_guard import generation_guard
from timetabler.services.timetable_generator import TimetableGenerator
from timetabler.services.timetable_store import TimetableStore
from timetabler.services.validation import find_violations

router = APIRouter()
logger = logging.getLogger(__name__)
settings = get_settings()


@router.post("/generate", response_model=GenerationReport)
def generate_timetable(
    payload: GenerateTimetableRequest | None = Body(default=None),
    db: Session = Depends(get_db),
) -> GenerationReport:
    seed = payload.random_seed if payload is not None else None
    if seed is None:
        seed = settings.generation_random_seed
    with generation_guard.hold():
        return TimetableGenerator(db=db, random_seed=seed).run()


@router.delete("", response_model=ResetTimetableResponse)
def reset_timetable(db: Session = Depends(get_db)) -> ResetTimetableResponse:
    with generation_guard.hold():
        deleted = TimetableStore(db).reset()
        db.commit()
    return ResetTimetableResponse(deleted=deleted)


@router.get("", response_model=list[TimetableEntryOut])
def list_timetable(
    division_id: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
) -> list[TimetableEntryOut]:
    return TimetableStore(db).list_entries(division_id=division_id)


@router.get("/divisions/{division_id}/grid", response_model=DivisionGridOut)
def division_grid(division_id: int, db: Session = Depends(get_db)) -> DivisionGridOut:
    if db.get(Division, division_id) is None:
        raise ResourceNotFoundError("Division", division_id)
    return TimetableStore(db).division_grid(division_id, load_calendar_config(db))


@router.get("/faculty/{faculty_id}", response_model=list[TimetableEntryOut])
def faculty_timetable(faculty_id: int, db: Session = Depends(get_db)) -> list[TimetableEntryOut]:
    if db.get(Faculty, faculty_id) is None:
        raise ResourceNotFoundError("Faculty", faculty_id)
    return TimetableStore(db).list_entries(faculty_id=faculty_id)


@router.get("/violations", response_model=list[TimetableViolation])
def timetable_violations(db: Session = Depends(get_db)) -> list[TimetableViolation]:
    entries = TimetableStore(db).entries()
    rooms = {room.id: room for room in db.execute(select(Room)).scalars()}
    divisions = {division.id: division for division in db.execute(select(Division)).scalars()}
    subjects = {subject.id: subject for subject in db.execute(select(Subject)).scalars()}
    violations = find_violations(entries, rooms=rooms, divisions=divisions, subjects=subjects)
    if violations:
        logger.warning("Committed timetable has %s violations", len(violations))
    return violations

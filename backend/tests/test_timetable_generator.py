from collections import Counter

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from timetabler.core.exceptions import TimetablePersistenceError
from timetabler.models.room import RoomType
from timetabler.models.timetable import TimetableEntry
from timetabler.services.timetable_generator import TimetableGenerator
from timetabler.services.timetable_store import TimetableStore


def entry_count(db):
    return db.execute(select(func.count()).select_from(TimetableEntry)).scalar_one()


def entry_facts(db):
    return {
        (entry.division_id, entry.day, entry.slot, entry.subject_id, entry.faculty_id, entry.room_id)
        for entry in db.execute(select(TimetableEntry)).scalars()
    }


@pytest.fixture()
def department_catalog(catalog):
    department = catalog.department("ECE")
    semester = catalog.semester(department, "Semester 5", semester_no=5)
    signals = catalog.subject(semester, "Signals and Systems", "EC301", credits=3)
    vlsi = catalog.subject(semester, "VLSI Design", "EC302", credits=3)
    vlsi_lab = catalog.subject(semester, "VLSI Lab", "EC302L", credits=4)
    catalog.faculty(department, "Dr. Iyer", subjects=[signals, vlsi])
    catalog.faculty(department, "Dr. Menon", subjects=[vlsi, vlsi_lab])
    catalog.faculty(department, "Dr. Shah", subjects=[signals, vlsi_lab])
    catalog.room(department, "E-201", capacity=65)
    catalog.room(department, "E-202", capacity=70)
    catalog.room(department, "E-LAB1", capacity=70, type=RoomType.lab)
    divisions = [
        catalog.division(semester, "A", size=60),
        catalog.division(semester, "B", size=62),
    ]
    catalog.commit()
    return {"subjects": [signals, vlsi, vlsi_lab], "divisions": divisions}


def test_trivial_catalog_generates_two_entries(db_session, trivial_catalog):
    report = TimetableGenerator(db=db_session, random_seed=1).run()

    assert report.attempted_units == 2
    assert report.placed_units == 2
    assert report.committed_slots == 2
    assert report.unplaced == []
    assert entry_count(db_session) == 2
    assert report.calendar.num_weekdays == 5
    assert report.calendar.num_daily_slots == 6


def test_missing_faculty_reports_shortfall(db_session, catalog):
    department = catalog.department()
    semester = catalog.semester(department)
    catalog.subject(semester, "Thermodynamics", "ME201", credits=3)
    catalog.room(department, "M-1", capacity=50)
    catalog.division(semester, "A", size=30)
    catalog.commit()

    report = TimetableGenerator(db=db_session, random_seed=1).run()

    assert report.attempted_units == 3
    assert report.placed_units == 0
    assert not report.complete
    assert entry_count(db_session) == 0
    assert {item.reason for item in report.unplaced} == {"no_eligible_faculty"}


def test_empty_catalog_completes_with_zero_placements(db_session):
    report = TimetableGenerator(db=db_session).run()

    assert report.attempted_units == 0
    assert report.placed_units == 0
    assert report.groups == []


def test_latest_calendar_config_is_used(db_session, catalog, trivial_catalog):
    catalog.calendar(num_weekdays=5, num_daily_slots=4, lab_slot_length=2)
    catalog.calendar(num_weekdays=6, num_daily_slots=8, lab_slot_length=3)
    catalog.commit()

    report = TimetableGenerator(db=db_session, random_seed=1).run()

    assert report.calendar.num_weekdays == 6
    assert report.calendar.num_daily_slots == 8
    assert report.calendar.lab_slot_length == 3


def test_units_are_conserved_per_subject_and_division(db_session, department_catalog):
    report = TimetableGenerator(db=db_session, random_seed=4).run()

    placed_per_subject = Counter()
    for group in report.groups:
        assert group.attempted_units == 3 + 3 + 2
    unplaced = Counter((item.division_id, item.subject_id) for item in report.unplaced)
    expected_units = {"EC301": 3, "EC302": 3, "EC302L": 2}
    lengths = {"EC301": 1, "EC302": 1, "EC302L": 2}
    for division in department_catalog["divisions"]:
        for subject in department_catalog["subjects"]:
            placed_per_subject[(division.id, subject.id)] = expected_units[subject.code] - unplaced[(division.id, subject.id)]

    rows = Counter(
        (entry.division_id, entry.subject_id) for entry in db_session.execute(select(TimetableEntry)).scalars()
    )
    for division in department_catalog["divisions"]:
        for subject in department_catalog["subjects"]:
            key = (division.id, subject.id)
            assert rows[key] == placed_per_subject[key] * lengths[subject.code]


def test_regenerating_replaces_the_previous_schedule(db_session, department_catalog):
    first = TimetableGenerator(db=db_session, random_seed=10).run()
    assert entry_count(db_session) == first.committed_slots

    second = TimetableGenerator(db=db_session, random_seed=11).run()
    assert entry_count(db_session) == second.committed_slots


def test_fixed_seed_reproduces_the_schedule(db_session, department_catalog):
    TimetableGenerator(db=db_session, random_seed=77).run()
    first = entry_facts(db_session)

    TimetableGenerator(db=db_session, random_seed=77).run()
    second = entry_facts(db_session)

    assert first
    assert first == second


def test_committed_schedule_has_no_clashes(db_session, department_catalog):
    TimetableGenerator(db=db_session, random_seed=5).run()
    entries = list(db_session.execute(select(TimetableEntry)).scalars())

    for attribute in ("faculty_id", "room_id", "division_id"):
        keys = Counter((getattr(entry, attribute), entry.day, entry.slot) for entry in entries)
        assert max(keys.values()) == 1


def test_persistence_failure_aborts_and_keeps_previous_timetable(db_session, trivial_catalog, monkeypatch):
    TimetableGenerator(db=db_session, random_seed=1).run()
    before = entry_facts(db_session)

    def failing_flush(*args, **kwargs):
        raise OperationalError("INSERT INTO timetable_entries", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db_session, "flush", failing_flush)
    with pytest.raises(TimetablePersistenceError):
        TimetableGenerator(db=db_session, random_seed=2).run()
    monkeypatch.undo()

    assert entry_facts(db_session) == before


def test_reset_is_idempotent(db_session, trivial_catalog):
    TimetableGenerator(db=db_session, random_seed=1).run()
    store = TimetableStore(db_session)

    assert store.reset() == 2
    db_session.commit()
    assert store.reset() == 0
    db_session.commit()
    assert entry_count(db_session) == 0


def test_unseeded_run_reports_a_seed_that_reproduces_it(db_session, department_catalog):
    report = TimetableGenerator(db=db_session).run()
    assert isinstance(report.random_seed, int)
    assert 0 <= report.random_seed < 2_000_000_000
    first = entry_facts(db_session)

    TimetableGenerator(db=db_session, random_seed=report.random_seed).run()
    assert entry_facts(db_session) == first

import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from timetabler.api.deps import get_db
from timetabler.db.base import Base
from timetabler.main import app
from timetabler.models import (
    CalendarConfig,
    Department,
    Division,
    Faculty,
    Room,
    RoomType,
    Semester,
    Subject,
)


class CatalogBuilder:
    """Writes catalog records straight through the ORM; record management has no API."""

    def __init__(self, db):
        self.db = db

    def _add(self, record):
        self.db.add(record)
        self.db.flush()
        return record

    def department(self, name="CSE"):
        return self._add(Department(name=name))

    def semester(self, department, name="Semester 3", semester_no=3):
        return self._add(Semester(department_id=department.id, name=name, semester_no=semester_no))

    def subject(self, semester, name, code, credits=3):
        return self._add(
            Subject(
                department_id=semester.department_id,
                semester_id=semester.id,
                name=name,
                code=code,
                credits=credits,
            )
        )

    def faculty(self, department, name, subjects=()):
        member = Faculty(name=name, department_id=department.id)
        member.subjects = list(subjects)
        return self._add(member)

    def room(self, department, room_number, capacity, type=RoomType.classroom):
        return self._add(Room(room_number=room_number, department_id=department.id, type=type, capacity=capacity))

    def division(self, semester, name="A", size=30):
        return self._add(Division(semester_id=semester.id, name=name, size=size))

    def calendar(self, num_weekdays=5, num_daily_slots=6, lab_slot_length=2):
        return self._add(
            CalendarConfig(
                num_weekdays=num_weekdays,
                num_daily_slots=num_daily_slots,
                lab_slot_length=lab_slot_length,
            )
        )

    def commit(self):
        self.db.commit()


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def catalog(db_session):
    return CatalogBuilder(db_session)


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def trivial_catalog(catalog):
    """One division of 30, one two-credit theory subject, one teacher, one room of 40."""
    department = catalog.department()
    semester = catalog.semester(department)
    subject = catalog.subject(semester, "Discrete Mathematics", "MA201", credits=2)
    teacher = catalog.faculty(department, "Dr. Rao", subjects=[subject])
    room = catalog.room(department, "C-101", capacity=40)
    division = catalog.division(semester, "A", size=30)
    catalog.commit()
    return {
        "department": department,
        "semester": semester,
        "subject": subject,
        "faculty": teacher,
        "room": room,
        "division": division,
    }

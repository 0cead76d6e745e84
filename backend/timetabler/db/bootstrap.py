from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Connection, Engine

from timetabler.db.base import Base
import timetabler.models  # noqa: F401

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "calendar_configs": {"id", "num_weekdays", "num_daily_slots", "lab_slot_length"},
    "subjects": {"id", "code", "name", "credits", "semester_id", "department_id"},
    "faculty": {"id", "name", "department_id"},
    "faculty_subjects": {"faculty_id", "subject_id"},
    "rooms": {"id", "room_number", "type", "capacity", "department_id"},
    "divisions": {"id", "semester_id", "name", "size"},
    "timetable_entries": {"id", "division_id", "day", "slot", "subject_id", "faculty_id", "room_id"},
}


def missing_schema(connection: Connection) -> tuple[list[str], dict[str, list[str]]]:
    inspector = inspect(connection)
    table_names = set(inspector.get_table_names())
    missing_tables: list[str] = []
    missing_columns: dict[str, list[str]] = {}
    for table_name, columns in REQUIRED_COLUMNS.items():
        if table_name not in table_names:
            missing_tables.append(table_name)
            continue
        existing = {item["name"] for item in inspector.get_columns(table_name)}
        missing = sorted(columns - existing)
        if missing:
            missing_columns[table_name] = missing
    return missing_tables, missing_columns


def ensure_runtime_schema(engine: Engine) -> None:
    with engine.begin() as connection:
        missing_tables, missing_columns = missing_schema(connection)
        if missing_tables:
            logger.info("Creating missing tables: %s", ", ".join(sorted(missing_tables)))
            Base.metadata.create_all(bind=connection, checkfirst=True)
        if missing_columns:
            # Column drift needs an Alembic migration; only report it here.
            logger.warning("Timetable schema is missing columns: %s", missing_columns)

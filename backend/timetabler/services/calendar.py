from __future__ import annotations

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from timetabler.core.exceptions import SchedulerError
from timetabler.models.calendar_config import CalendarConfig
from timetabler.schemas.calendar import DEFAULT_CALENDAR_CONFIG, CalendarConfigOut


def get_latest_calendar_record(db: Session) -> CalendarConfig | None:
    return db.execute(select(CalendarConfig).order_by(CalendarConfig.id.desc()).limit(1)).scalar_one_or_none()


def build_calendar_config(record: CalendarConfig | None) -> CalendarConfigOut:
    if record is None:
        return DEFAULT_CALENDAR_CONFIG

    try:
        return CalendarConfigOut(
            id=record.id,
            num_weekdays=record.num_weekdays or DEFAULT_CALENDAR_CONFIG.num_weekdays,
            num_daily_slots=record.num_daily_slots or DEFAULT_CALENDAR_CONFIG.num_daily_slots,
            lab_slot_length=record.lab_slot_length or DEFAULT_CALENDAR_CONFIG.lab_slot_length,
            created_at=record.created_at,
        )
    except ValidationError as exc:
        raise SchedulerError(
            message="Stored calendar configuration is invalid",
            details={"calendar_config_id": record.id, "errors": exc.errors(include_url=False)},
        ) from exc


def load_calendar_config(db: Session) -> CalendarConfigOut:
    return build_calendar_config(get_latest_calendar_record(db))

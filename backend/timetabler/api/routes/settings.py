import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from timetabler.api.deps import get_db
from timetabler.core.exceptions import ResourceNotFoundError
from timetabler.models.calendar_config import CalendarConfig
from timetabler.schemas.calendar import CalendarConfigCreate, CalendarConfigOut
from timetabler.services.calendar import load_calendar_config

router = APIRouter()
logger = logging.getLogger(__name__)


def _get_calendar_record(db: Session, config_id: int) -> CalendarConfig:
    record = db.get(CalendarConfig, config_id)
    if record is None:
        raise ResourceNotFoundError("Calendar config", config_id)
    return record


@router.get("/settings/calendar", response_model=CalendarConfigOut)
def get_calendar_config(db: Session = Depends(get_db)) -> CalendarConfigOut:
    return load_calendar_config(db)


@router.get("/settings/calendar/history", response_model=list[CalendarConfigOut])
def list_calendar_configs(db: Session = Depends(get_db)) -> list[CalendarConfigOut]:
    records = db.execute(select(CalendarConfig).order_by(CalendarConfig.id.desc())).scalars().all()
    return [CalendarConfigOut.model_validate(record) for record in records]


@router.get("/settings/calendar/{config_id}", response_model=CalendarConfigOut)
def get_calendar_config_by_id(config_id: int, db: Session = Depends(get_db)) -> CalendarConfigOut:
    return CalendarConfigOut.model_validate(_get_calendar_record(db, config_id))


@router.post("/settings/calendar", response_model=CalendarConfigOut, status_code=status.HTTP_201_CREATED)
def create_calendar_config(payload: CalendarConfigCreate, db: Session = Depends(get_db)) -> CalendarConfigOut:
    record = CalendarConfig(**payload.model_dump())
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info(
        "Calendar config %s stored: %s days x %s slots, lab block %s",
        record.id,
        record.num_weekdays,
        record.num_daily_slots,
        record.lab_slot_length,
    )
    return CalendarConfigOut.model_validate(record)


@router.put("/settings/calendar/{config_id}", response_model=CalendarConfigOut)
def update_calendar_config(
    config_id: int,
    payload: CalendarConfigCreate,
    db: Session = Depends(get_db),
) -> CalendarConfigOut:
    record = _get_calendar_record(db, config_id)
    for key, value in payload.model_dump().items():
        setattr(record, key, value)
    db.commit()
    db.refresh(record)
    logger.info("Calendar config %s updated", record.id)
    return CalendarConfigOut.model_validate(record)


@router.delete("/settings/calendar/{config_id}")
def delete_calendar_config(config_id: int, db: Session = Depends(get_db)) -> dict:
    record = _get_calendar_record(db, config_id)
    db.delete(record)
    db.commit()
    logger.info("Calendar config %s deleted", config_id)
    return {"success": True}

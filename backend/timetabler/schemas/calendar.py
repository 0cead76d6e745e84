from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


class CalendarConfigBase(BaseModel):
    num_weekdays: int = Field(default=5, ge=5, le=6)
    num_daily_slots: int = Field(default=6, ge=1, le=24)
    lab_slot_length: int = Field(default=2, ge=1, le=24)

    @property
    def days(self) -> list[str]:
        return list(WEEKDAY_NAMES[: self.num_weekdays])


class CalendarConfigCreate(CalendarConfigBase):
    pass


class CalendarConfigOut(CalendarConfigBase):
    id: int | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


DEFAULT_CALENDAR_CONFIG = CalendarConfigOut()

from datetime import datetime

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from timetabler.db.base import Base


class CalendarConfig(Base):
    __tablename__ = "calendar_configs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    num_weekdays: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    num_daily_slots: Mapped[int] = mapped_column(Integer, nullable=False, default=6)
    lab_slot_length: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

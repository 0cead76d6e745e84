from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from timetabler.schemas.calendar import CalendarConfigBase

UnplacedReason = Literal["no_eligible_faculty", "no_eligible_room", "no_feasible_slot"]


class GenerateTimetableRequest(BaseModel):
    random_seed: int | None = Field(default=None, ge=0, le=2_000_000_000)


class UnplacedUnit(BaseModel):
    division_id: int
    subject_id: int
    subject_code: str
    length: int
    reason: UnplacedReason


class GroupGenerationSummary(BaseModel):
    division_id: int
    division_name: str
    attempted_units: int
    placed_units: int
    day_load_cap: int


class GenerationReport(BaseModel):
    placed_units: int
    attempted_units: int
    committed_slots: int
    random_seed: int | None = None
    calendar: CalendarConfigBase
    groups: list[GroupGenerationSummary] = Field(default_factory=list)
    unplaced: list[UnplacedUnit] = Field(default_factory=list)

    @property
    def complete(self) -> bool:
        return self.placed_units == self.attempted_units

from __future__ import annotations

import logging
import random
from time import perf_counter

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from timetabler.core.exceptions import TimetablePersistenceError
from timetabler.models.subject import Subject
from timetabler.schemas.calendar import CalendarConfigBase
from timetabler.schemas.generator import GenerationReport, GroupGenerationSummary
from timetabler.services.calendar import load_calendar_config
from timetabler.services.catalog import list_divisions, list_subjects, load_catalog_index
from timetabler.services.placer import GreedyPlacer, RunContext
from timetabler.services.requirements import build_requirement_pool
from timetabler.services.timetable_store import TimetableStore

logger = logging.getLogger(__name__)

MAX_RANDOM_SEED = 2_000_000_000


class TimetableGenerator:
    """Runs one full reset-then-regenerate pass over every division.

    The reset and all inserts share the caller's session transaction, which is
    committed only after every entry has been flushed.
    """

    def __init__(
        self,
        *,
        db: Session,
        random_seed: int | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.db = db
        if random_seed is None and rng is None:
            random_seed = random.SystemRandom().randrange(MAX_RANDOM_SEED)
        self.random_seed = random_seed
        self.random = rng if rng is not None else random.Random(random_seed)
        self.store = TimetableStore(db)

    def run(self) -> GenerationReport:
        started = perf_counter()
        try:
            report = self._generate()
            self.store.flush()
            self.db.commit()
        except TimetablePersistenceError:
            self.db.rollback()
            logger.exception("Timetable generation aborted; previous timetable kept")
            raise
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Timetable generation aborted; previous timetable kept")
            raise TimetablePersistenceError("Timetable generation failed", details={"error": str(exc)}) from exc

        logger.info(
            "Timetable generated: %s/%s units placed, %s slots committed in %.3fs (seed=%s)",
            report.placed_units,
            report.attempted_units,
            report.committed_slots,
            perf_counter() - started,
            self.random_seed,
        )
        if report.unplaced:
            logger.warning("%s teaching units could not be placed", len(report.unplaced))
        return report

    def _generate(self) -> GenerationReport:
        calendar = load_calendar_config(self.db)
        catalog = load_catalog_index(self.db)
        divisions = list_divisions(self.db)
        placer = GreedyPlacer(calendar=calendar, catalog=catalog, rng=self.random)
        context = RunContext(sink=self.store.commit)

        self.store.reset()

        subjects_by_semester: dict[int, list[Subject]] = {}
        summaries: list[GroupGenerationSummary] = []
        attempted_total = 0
        placed_total = 0
        for division in divisions:
            subjects = subjects_by_semester.get(division.semester_id)
            if subjects is None:
                subjects = list_subjects(self.db, division.semester_id)
                subjects_by_semester[division.semester_id] = subjects

            pool = build_requirement_pool(subjects, calendar.lab_slot_length, self.random)
            cap = placer.day_load_cap(pool.total_credits)
            placed = placer.place(pool.units, division, context, day_load_cap=cap)

            attempted_total += len(pool.units)
            placed_total += placed
            summaries.append(
                GroupGenerationSummary(
                    division_id=division.id,
                    division_name=division.name,
                    attempted_units=len(pool.units),
                    placed_units=placed,
                    day_load_cap=cap,
                )
            )
            logger.debug(
                "Division %s (%s): %s/%s units placed, day cap %s",
                division.id,
                division.name,
                placed,
                len(pool.units),
                cap,
            )

        return GenerationReport(
            placed_units=placed_total,
            attempted_units=attempted_total,
            committed_slots=len(context.assignments),
            random_seed=self.random_seed,
            calendar=CalendarConfigBase(
                num_weekdays=calendar.num_weekdays,
                num_daily_slots=calendar.num_daily_slots,
                lab_slot_length=calendar.lab_slot_length,
            ),
            groups=summaries,
            unplaced=context.unplaced,
        )

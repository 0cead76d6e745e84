"""Expansion of subject credit loads into placeable teaching units."""
from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Iterable, Protocol


class SubjectLike(Protocol):
    id: int
    name: str
    code: str
    credits: int


@dataclass(frozen=True)
class TeachingUnit:
    subject_id: int
    subject_code: str
    length: int
    is_lab: bool


@dataclass
class RequirementPool:
    units: list[TeachingUnit]
    total_credits: int


def is_lab_subject(name: str | None, code: str | None) -> bool:
    return "lab" in f"{name or ''} {code or ''}".lower()


def effective_credits(credits: int | None) -> int:
    return max(1, int(credits or 0))


def expand_subject(subject: SubjectLike, lab_slot_length: int) -> list[TeachingUnit]:
    """Lab subjects become ``ceil(credits / lab_slot_length)`` full-length blocks,
    everything else one single-period unit per credit.

    A lab whose credits do not divide evenly still gets a full final block, so
    the scheduled length can exceed the declared credits.
    """
    credits = effective_credits(subject.credits)
    if is_lab_subject(subject.name, subject.code):
        blocks = math.ceil(credits / lab_slot_length)
        return [
            TeachingUnit(subject_id=subject.id, subject_code=subject.code, length=lab_slot_length, is_lab=True)
            for _ in range(blocks)
        ]
    return [
        TeachingUnit(subject_id=subject.id, subject_code=subject.code, length=1, is_lab=False)
        for _ in range(credits)
    ]


def build_requirement_pool(
    subjects: Iterable[SubjectLike],
    lab_slot_length: int,
    rng: random.Random,
) -> RequirementPool:
    units: list[TeachingUnit] = []
    total_credits = 0
    for subject in subjects:
        total_credits += effective_credits(subject.credits)
        units.extend(expand_subject(subject, lab_slot_length))
    # Shuffled so no subject systematically wins slot contention across runs.
    rng.shuffle(units)
    return RequirementPool(units=units, total_credits=total_credits)

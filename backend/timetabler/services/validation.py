from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Mapping

from timetabler.models.room import RoomType
from timetabler.schemas.timetable import TimetableViolation
from timetabler.services.requirements import is_lab_subject


def find_violations(
    entries: Iterable,
    *,
    rooms: Mapping[int, object],
    divisions: Mapping[int, object],
    subjects: Mapping[int, object],
) -> list[TimetableViolation]:
    """Re-check committed entries for clashes, undersized rooms and room-type mismatches."""
    violations: list[TimetableViolation] = []
    by_slot: dict[tuple[str, int], list] = defaultdict(list)

    for entry in entries:
        by_slot[(entry.day, entry.slot)].append(entry)

        room = rooms.get(entry.room_id)
        division = divisions.get(entry.division_id)
        if room is not None and division is not None and room.capacity < division.size:
            violations.append(
                TimetableViolation(
                    violation_type="room_capacity",
                    day=entry.day,
                    slot=entry.slot,
                    description=(
                        f"Room {room.room_number} capacity ({room.capacity}) "
                        f"< division {division.name} size ({division.size})"
                    ),
                    entry_ids=[entry.id],
                )
            )

        subject = subjects.get(entry.subject_id)
        if room is not None and subject is not None:
            expected = RoomType.lab if is_lab_subject(subject.name, subject.code) else RoomType.classroom
            if RoomType(room.type) != expected:
                violations.append(
                    TimetableViolation(
                        violation_type="room_type",
                        day=entry.day,
                        slot=entry.slot,
                        description=f"{subject.code} needs a {expected.value} but sits in {room.room_number}",
                        entry_ids=[entry.id],
                    )
                )

    clash_keys = (
        ("faculty_clash", "faculty_id", "Faculty"),
        ("room_clash", "room_id", "Room"),
        ("group_clash", "division_id", "Division"),
    )
    for (day, slot), slot_entries in by_slot.items():
        for violation_type, attribute, label in clash_keys:
            grouped: dict[int, list[int]] = defaultdict(list)
            for entry in slot_entries:
                grouped[getattr(entry, attribute)].append(entry.id)
            for entity_id, entry_ids in grouped.items():
                if len(entry_ids) < 2:
                    continue
                violations.append(
                    TimetableViolation(
                        violation_type=violation_type,
                        day=day,
                        slot=slot,
                        description=f"{label} {entity_id} is double-booked on {day} slot {slot}",
                        entry_ids=sorted(entry_ids),
                    )
                )
    return violations

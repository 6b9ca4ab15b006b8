"""Service for detecting conflicts between weekly class schedules.

Two slots collide when they share a school year, at least one weekday and part of
their time window. A collision is then reported once per shared resource: the same
room, the same teacher, or the same section. Intervals are half-open at minute
precision, so a class ending at 09:00 does not clash with one starting at 09:00.

The functions here are pure and never raise: a field that cannot be read or
interpreted simply yields no conflict. Callers validate input first (see
``schoolsched.domain.models.ScheduleIn``) and treat the result as an advisory
pre-check; the store remains the final arbiter under concurrent writes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from schoolsched.domain.models import Conflict, ConflictType
from schoolsched.domain.normalize import normalize_id, normalize_time, time_to_minutes
from schoolsched.services.formatting import format_days, format_time_range

logger = logging.getLogger(__name__)

__all__ = [
    "check_batch",
    "detect_conflicts",
    "has_common_days",
    "is_time_overlapping",
    "normalize_id",
    "normalize_time",
]

# Checked in this order; a record clashing on several yields one entry per row.
_DIMENSIONS = (
    (ConflictType.ROOM, "room_id", "Room"),
    (ConflictType.TEACHER, "teacher_id", "Teacher"),
    (ConflictType.SECTION, "section_id", "Section"),
)


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _school_year(value: Any) -> str | None:
    return value.strip() if isinstance(value, str) else None


def _weekday(value: Any) -> int | None:
    """The integer a day value stands for, or None for bools, fractions and junk."""
    if isinstance(value, (bool, str, bytes)):
        return None
    try:
        as_int = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return as_int if as_int == value else None


def _day_set(days: Any) -> frozenset[int]:
    if days is None or isinstance(days, (str, bytes)):
        return frozenset()
    try:
        items = iter(days)
    except TypeError:
        return frozenset()
    result = set()
    for day in items:
        weekday = _weekday(day)
        if weekday is not None:
            result.add(weekday)
    return frozenset(result)


def _as_hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _overlap(start1: Any, end1: Any, start2: Any, end2: Any) -> tuple[int, int] | None:
    """Return the shared ``[start, end)`` window in minutes, or ``None``."""
    bounds = [time_to_minutes(normalize_time(t)) for t in (start1, end1, start2, end2)]
    if any(b is None for b in bounds):
        return None
    s1, e1, s2, e2 = bounds
    if s1 < e2 and e1 > s2:
        return max(s1, s2), min(e1, e2)
    return None


def is_time_overlapping(start1: Any, end1: Any, start2: Any, end2: Any) -> bool:
    """Return True if ``[start1, end1)`` and ``[start2, end2)`` overlap.

    Times may be ``HH:MM`` or ``HH:MM:SS``; seconds are ignored. Touching endpoints
    do not overlap, and unreadable times never do.
    """
    return _overlap(start1, end1, start2, end2) is not None


def has_common_days(days1: Any, days2: Any) -> bool:
    """Return True if the two weekday collections share at least one day."""
    return bool(_day_set(days1) & _day_set(days2))


def detect_conflicts(
    candidate: Any,
    existing_schedules: Iterable[Any] | None,
    exclude_id: Any = None,
) -> list[Conflict]:
    """Return every conflict between *candidate* and *existing_schedules*.

    Records may be models or plain mappings. Results follow the order of
    *existing_schedules*; conflicts for one record are ordered room, teacher,
    section. A record whose id matches *exclude_id* is skipped, which is how an
    in-place edit leaves itself out.
    """
    conflicts: list[Conflict] = []

    school_year = _school_year(_field(candidate, "school_year"))
    if school_year is None:
        return conflicts
    days = _day_set(_field(candidate, "days_of_week"))
    start_time = _field(candidate, "start_time")
    end_time = _field(candidate, "end_time")
    skip_id = normalize_id(exclude_id)

    try:
        records = iter(existing_schedules or ())
    except TypeError:
        return conflicts

    for existing in records:
        if skip_id and normalize_id(_field(existing, "id")) == skip_id:
            continue
        if _school_year(_field(existing, "school_year")) != school_year:
            continue

        shared_days = days & _day_set(_field(existing, "days_of_week"))
        if not shared_days:
            continue

        window = _overlap(
            start_time,
            end_time,
            _field(existing, "start_time"),
            _field(existing, "end_time"),
        )
        if window is None:
            continue

        # Out-of-range days still collide; show them as numbers.
        day_list = format_days(shared_days) or ", ".join(map(str, sorted(shared_days)))
        when = (
            f"on {day_list} at "
            f"{format_time_range(_as_hhmm(window[0]), _as_hhmm(window[1]))} "
            f"({school_year})"
        )
        for conflict_type, attr, label in _DIMENSIONS:
            ours = normalize_id(_field(candidate, attr))
            if ours and ours == normalize_id(_field(existing, attr)):
                conflicts.append(
                    Conflict(
                        type=conflict_type,
                        message=f"{label} {ours} is already scheduled {when}",
                        conflicting_schedule=existing,
                    )
                )

    logger.debug(
        "conflict check year=%s days=%s %s-%s: %d conflict(s)",
        school_year,
        sorted(days),
        start_time,
        end_time,
        len(conflicts),
    )
    return conflicts


def check_batch(
    candidates: Iterable[Any],
    existing_schedules: Iterable[Any] | None,
) -> list[tuple[int, Conflict]]:
    """Check several new slots at once, including against each other.

    Each candidate is compared with the existing schedules and with the candidates
    before it. Returns ``(candidate_index, conflict)`` pairs.
    """
    seen = list(existing_schedules or ())
    results: list[tuple[int, Conflict]] = []
    for index, candidate in enumerate(candidates):
        results.extend((index, conflict) for conflict in detect_conflicts(candidate, seen))
        seen.append(candidate)
    return results

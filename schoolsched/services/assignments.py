"""Teacher assignment lookups derived from class schedules."""

from __future__ import annotations

from collections.abc import Iterable

from schoolsched.domain.models import Schedule
from schoolsched.domain.normalize import normalize_id, time_to_minutes


def can_enter_grades(
    teacher_id: str | int,
    section_id: str | int,
    subject_id: str | int,
    school_year: str,
    schedules: Iterable[Schedule],
) -> bool:
    """A teacher may enter grades for a subject in a section they are scheduled to teach."""
    teacher = normalize_id(teacher_id)
    section = normalize_id(section_id)
    subject = normalize_id(subject_id)
    year = school_year.strip()
    if not (teacher and section and subject and year):
        return False
    return any(
        s.teacher_id == teacher
        and s.section_id == section
        and s.subject_id == subject
        and s.school_year == year
        for s in schedules
    )


def teaching_load(
    teacher_id: str | int,
    school_year: str,
    schedules: Iterable[Schedule],
) -> list[Schedule]:
    """The teacher's schedules for the year, by first weekday then start time."""
    teacher = normalize_id(teacher_id)
    year = school_year.strip()
    mine = [s for s in schedules if s.teacher_id == teacher and s.school_year == year]
    return sorted(mine, key=lambda s: (s.days_of_week[0], time_to_minutes(s.start_time)))

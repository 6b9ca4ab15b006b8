"""Copy schedules, or a whole section with its schedules, into another school year."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from schoolsched.domain.models import Schedule, Section
from schoolsched.services.conflicts import check_batch, detect_conflicts
from schoolsched.services.errors import ScheduleConflictError

logger = logging.getLogger(__name__)


def _copy_schedule(source: Schedule, **changes) -> Schedule:
    data = source.model_dump(exclude={"id", "created_at"})
    data.update(changes)
    return Schedule(**data)


def duplicate_schedule(
    source: Schedule,
    school_year: str,
    existing: Iterable[Schedule],
) -> Schedule:
    """Return a copy of *source* in *school_year*.

    Raises ``ScheduleConflictError`` if the copy collides with *existing*, which
    should hold the schedules of the target year.
    """
    copy = _copy_schedule(source, school_year=school_year)
    conflicts = detect_conflicts(copy, existing)
    if conflicts:
        logger.info(
            "duplicate of schedule %s into %s rejected: %d conflict(s)",
            source.id,
            copy.school_year,
            len(conflicts),
        )
        raise ScheduleConflictError(conflicts)
    return copy


def duplicate_section(
    source: Section,
    schedules: Iterable[Schedule],
    name: str,
    school_year: str,
    existing: Iterable[Schedule],
) -> tuple[Section, list[Schedule]]:
    """Build a new section in *school_year* along with copies of its schedules.

    Only schedules of *source* in its own school year are copied. Every copy is
    checked against *existing* and against the other copies; if any conflict is
    found nothing is returned and ``ScheduleConflictError`` is raised, so the
    caller never has to undo a partial copy.
    """
    section = Section(
        **source.model_dump(exclude={"id", "created_at", "name", "school_year", "is_active"}),
        name=name,
        school_year=school_year,
        is_active=True,
    )
    copies = [
        _copy_schedule(s, section_id=section.id, school_year=section.school_year)
        for s in schedules
        if s.section_id == source.id and s.school_year == source.school_year
    ]

    found = check_batch(copies, existing)
    if found:
        logger.info(
            "duplicate of section %s into %s rejected: %d conflict(s)",
            source.id,
            section.school_year,
            len(found),
        )
        raise ScheduleConflictError([conflict for _, conflict in found])

    logger.info(
        "section %s duplicated as %s with %d schedule(s)", source.id, section.id, len(copies)
    )
    return section, copies

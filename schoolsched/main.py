"""FastAPI application — entry point for the class schedule service."""

from __future__ import annotations

import logging
from datetime import date, datetime

from fastapi import FastAPI, HTTPException, Query

from schoolsched.config import settings
from schoolsched.domain.bus import EventBus
from schoolsched.domain.events import (
    ConflictRejected,
    ScheduleCreated,
    ScheduleDeleted,
    ScheduleDuplicated,
    ScheduleUpdated,
    SectionDuplicated,
)
from schoolsched.domain.handlers import HandlerRegistry
from schoolsched.domain.models import (
    ActivityEntry,
    Conflict,
    ConflictCheckRequest,
    ConflictCheckResponse,
    DuplicateScheduleRequest,
    DuplicateSectionRequest,
    DuplicateSectionResponse,
    GradeAccessResponse,
    Occurrence,
    Schedule,
    ScheduleIn,
    SchoolYearsResponse,
    Section,
    SectionIn,
)
from schoolsched.logging_config import setup_logging
from schoolsched.repos.memory import (
    ActivityRepository,
    ScheduleRepository,
    SectionRepository,
)
from schoolsched.services.assignments import can_enter_grades, teaching_load
from schoolsched.services.conflicts import detect_conflicts
from schoolsched.services.duplication import duplicate_schedule, duplicate_section
from schoolsched.services.errors import ScheduleConflictError
from schoolsched.services.recurrence import expand_occurrences
from schoolsched.services.school_year import (
    current_school_year,
    next_school_year,
    school_year_options,
)

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_title)

# ── Singletons (created at import time for simplicity) ────────────────
event_bus = EventBus()
schedule_repo = ScheduleRepository()
section_repo = SectionRepository()
activity_repo = ActivityRepository()

handler_registry = HandlerRegistry(
    bus=event_bus,
    schedule_repo=schedule_repo,
    activity_repo=activity_repo,
)


def _reject(
    conflicts: list[Conflict], action: str, record_id: str | None = None
) -> HTTPException:
    """Publish the rejection and build the 409 the caller should raise."""
    error = ScheduleConflictError(conflicts)
    event_bus.publish(
        ConflictRejected(
            record_id=record_id,
            action=action,
            conflict_types=[c.type for c in conflicts],
            conflicting_schedule_ids=[
                str(getattr(c.conflicting_schedule, "id", "")) for c in conflicts
            ],
        )
    )
    return HTTPException(
        status_code=409,
        detail={
            "message": error.message,
            "conflicts": [c.model_dump(mode="json", by_alias=True) for c in conflicts],
        },
    )


def _get_schedule_or_404(schedule_id: str) -> Schedule:
    schedule = schedule_repo.get(schedule_id)
    if schedule is None:
        raise HTTPException(status_code=404, detail="Schedule not found")
    return schedule


def _get_section_or_404(section_id: str) -> Section:
    section = section_repo.get(section_id)
    if section is None:
        raise HTTPException(status_code=404, detail="Section not found")
    return section


def _target_year(requested: str | None, source_year: str) -> str:
    if requested:
        return requested
    try:
        return next_school_year(source_year)
    except ValueError as exc:
        raise HTTPException(
            status_code=422,
            detail=f"school_year is required; no year follows {source_year!r}",
        ) from exc


# ── Schedules ─────────────────────────────────────────────────────────


@app.post("/schedules/check", response_model=ConflictCheckResponse)
def check_schedule(payload: ConflictCheckRequest) -> ConflictCheckResponse:
    """Report conflicts for a proposed slot without saving anything.

    Pass ``exclude_id`` when checking an edit so the record does not clash with itself.
    """
    existing = schedule_repo.list_for_school_year(payload.schedule.school_year)
    conflicts = detect_conflicts(payload.schedule, existing, payload.exclude_id)
    return ConflictCheckResponse(conflicts=conflicts)


@app.post("/schedules", response_model=Schedule, status_code=201)
def create_schedule(payload: ScheduleIn) -> Schedule:
    """Store a new schedule unless it collides with one in the same school year."""
    existing = schedule_repo.list_for_school_year(payload.school_year)
    conflicts = detect_conflicts(payload, existing)
    if conflicts:
        raise _reject(conflicts, action="create")

    schedule = Schedule(**payload.model_dump())
    schedule_repo.add(schedule)
    event_bus.publish(ScheduleCreated(schedule_id=schedule.id))
    return schedule


@app.get("/schedules", response_model=list[Schedule])
def list_schedules(
    school_year: str | None = None, section_id: str | None = None
) -> list[Schedule]:
    if section_id is not None:
        return schedule_repo.list_for_section(section_id, school_year)
    if school_year is not None:
        return schedule_repo.list_for_school_year(school_year)
    return schedule_repo.list_all()


@app.get("/schedules/{schedule_id}", response_model=Schedule)
def get_schedule(schedule_id: str) -> Schedule:
    return _get_schedule_or_404(schedule_id)


@app.put("/schedules/{schedule_id}", response_model=Schedule)
def update_schedule(schedule_id: str, payload: ScheduleIn) -> Schedule:
    """Replace a schedule in place, checking it against everything but itself."""
    stored = _get_schedule_or_404(schedule_id)
    existing = schedule_repo.list_for_school_year(payload.school_year)
    conflicts = detect_conflicts(payload, existing, exclude_id=stored.id)
    if conflicts:
        raise _reject(conflicts, action="update", record_id=stored.id)

    updated = Schedule(
        **payload.model_dump(), id=stored.id, created_at=stored.created_at
    )
    schedule_repo.update(updated)
    event_bus.publish(ScheduleUpdated(schedule_id=updated.id))
    return updated


@app.delete("/schedules/{schedule_id}", status_code=204)
def delete_schedule(schedule_id: str) -> None:
    stored = _get_schedule_or_404(schedule_id)
    schedule_repo.delete(stored.id)
    event_bus.publish(ScheduleDeleted(schedule_id=stored.id))


@app.post(
    "/schedules/{schedule_id}/duplicate", response_model=Schedule, status_code=201
)
def duplicate_schedule_endpoint(
    schedule_id: str, body: DuplicateScheduleRequest
) -> Schedule:
    """Copy a schedule into another school year, by default the following one."""
    source = _get_schedule_or_404(schedule_id)
    school_year = _target_year(body.school_year, source.school_year)
    try:
        copy = duplicate_schedule(
            source,
            school_year,
            schedule_repo.list_for_school_year(school_year),
        )
    except ScheduleConflictError as exc:
        raise _reject(exc.conflicts, action="duplicate", record_id=source.id) from exc

    schedule_repo.add(copy)
    event_bus.publish(
        ScheduleDuplicated(
            source_id=source.id, schedule_id=copy.id, school_year=copy.school_year
        )
    )
    return copy


@app.get("/schedules/{schedule_id}/occurrences", response_model=list[Occurrence])
def list_occurrences(
    schedule_id: str, start: date = Query(...), end: date = Query(...)
) -> list[Occurrence]:
    """Dated meetings of a schedule between two dates, for calendar views."""
    schedule = _get_schedule_or_404(schedule_id)
    if end < start:
        raise HTTPException(status_code=400, detail="end must not be before start")
    return expand_occurrences(schedule, start, end)


# ── Sections ──────────────────────────────────────────────────────────


@app.post("/sections", response_model=Section, status_code=201)
def create_section(payload: SectionIn) -> Section:
    section = Section(**payload.model_dump())
    section_repo.add(section)
    return section


@app.get("/sections", response_model=list[Section])
def list_sections(school_year: str | None = None) -> list[Section]:
    sections = section_repo.list_all()
    if school_year is not None:
        sections = [s for s in sections if s.school_year == school_year.strip()]
    return sections


@app.get("/sections/{section_id}", response_model=Section)
def get_section(section_id: str) -> Section:
    return _get_section_or_404(section_id)


@app.post(
    "/sections/{section_id}/duplicate",
    response_model=DuplicateSectionResponse,
    status_code=201,
)
def duplicate_section_endpoint(
    section_id: str, body: DuplicateSectionRequest
) -> DuplicateSectionResponse:
    """Copy a section and all of its schedules into another school year.

    Either everything is copied or, on any conflict, nothing is.
    """
    source = _get_section_or_404(section_id)
    school_year = _target_year(body.school_year, source.school_year)
    try:
        section, copies = duplicate_section(
            source,
            schedule_repo.list_for_section(source.id, source.school_year),
            name=body.name,
            school_year=school_year,
            existing=schedule_repo.list_for_school_year(school_year),
        )
    except ScheduleConflictError as exc:
        raise _reject(
            exc.conflicts, action="duplicate_section", record_id=source.id
        ) from exc

    section_repo.add(section)
    schedule_repo.add_many(copies)
    event_bus.publish(
        SectionDuplicated(
            source_id=source.id,
            section_id=section.id,
            schedule_ids=[s.id for s in copies],
            school_year=section.school_year,
        )
    )
    return DuplicateSectionResponse(section=section, schedules=copies)


# ── Teachers ──────────────────────────────────────────────────────────


@app.get("/teachers/{teacher_id}/grade-access", response_model=GradeAccessResponse)
def grade_access(
    teacher_id: str, section_id: str, subject_id: str, school_year: str
) -> GradeAccessResponse:
    """Whether the teacher is scheduled to teach the subject to the section."""
    allowed = can_enter_grades(
        teacher_id,
        section_id,
        subject_id,
        school_year,
        schedule_repo.list_for_school_year(school_year),
    )
    return GradeAccessResponse(
        teacher_id=teacher_id,
        section_id=section_id,
        subject_id=subject_id,
        school_year=school_year.strip(),
        allowed=allowed,
    )


@app.get("/teachers/{teacher_id}/schedules", response_model=list[Schedule])
def teacher_schedules(teacher_id: str, school_year: str) -> list[Schedule]:
    return teaching_load(
        teacher_id, school_year, schedule_repo.list_for_school_year(school_year)
    )


# ── Misc ──────────────────────────────────────────────────────────────


@app.get("/school-years", response_model=SchoolYearsResponse)
def school_years(now: datetime | None = None) -> SchoolYearsResponse:
    """Current school year and the options offered in forms.

    Pass *now* to evaluate against a fixed date; defaults to the local clock.
    """
    current_time = now or datetime.now()
    return SchoolYearsResponse(
        current=current_school_year(current_time),
        options=school_year_options(current_time),
    )


@app.get("/activity/{record_id}", response_model=list[ActivityEntry])
def list_activity(record_id: str) -> list[ActivityEntry]:
    return activity_repo.list_for_record(record_id)

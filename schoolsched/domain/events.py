"""Domain events emitted when schedules and sections change."""

from __future__ import annotations

from pydantic import BaseModel


class ScheduleCreated(BaseModel):
    """Fired when a new schedule is stored."""

    schedule_id: str


class ScheduleUpdated(BaseModel):
    schedule_id: str


class ScheduleDeleted(BaseModel):
    schedule_id: str


class ScheduleDuplicated(BaseModel):
    """Fired when a schedule is copied into another school year."""

    source_id: str
    schedule_id: str
    school_year: str


class SectionDuplicated(BaseModel):
    """Fired when a section and its schedules are copied into another school year."""

    source_id: str
    section_id: str
    schedule_ids: list[str]
    school_year: str


class ConflictRejected(BaseModel):
    """Fired when a write is refused because the proposed slot collides.

    *record_id* is the schedule or section the write was about, when it has one.
    """

    record_id: str | None = None
    action: str
    conflict_types: list[str]
    conflicting_schedule_ids: list[str]

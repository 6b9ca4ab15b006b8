"""Domain models for class schedules, sections and the activity trail."""

from __future__ import annotations

import re
import uuid
from datetime import date, datetime, timezone
from enum import StrEnum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

from schoolsched.domain.normalize import normalize_id, normalize_time, time_to_minutes

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d(:[0-5]\d)?$")


class ConflictType(StrEnum):
    ROOM = "room"
    TEACHER = "teacher"
    SECTION = "section"


class ActivityType(StrEnum):
    SCHEDULE_CREATED = "schedule_created"
    SCHEDULE_UPDATED = "schedule_updated"
    SCHEDULE_DELETED = "schedule_deleted"
    SCHEDULE_DUPLICATED = "schedule_duplicated"
    SECTION_DUPLICATED = "section_duplicated"
    CONFLICT_REJECTED = "conflict_rejected"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class ScheduleIn(BaseModel):
    """A weekly recurring class slot, validated at the boundary.

    Ids are stored in their canonical string form and times are cut down to
    ``HH:MM``, so two records built from ``7``/``"7"`` or ``"08:00"``/``"08:00:00"``
    are equal field for field.
    """

    subject_id: str | None = None
    section_id: str = Field(min_length=1)
    teacher_id: str = Field(min_length=1)
    room_id: str = Field(min_length=1)
    school_id: str | None = None
    days_of_week: list[int] = Field(min_length=1)
    start_time: str
    end_time: str
    school_year: str = Field(min_length=1)

    @field_validator("section_id", "teacher_id", "room_id", mode="before")
    @classmethod
    def _canonical_id(cls, value: Any) -> str:
        return normalize_id(value)

    @field_validator("subject_id", "school_id", mode="before")
    @classmethod
    def _canonical_optional_id(cls, value: Any) -> str | None:
        return normalize_id(value) or None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _minute_precision(cls, value: Any) -> str:
        if not isinstance(value, str) or not _TIME_RE.match(value.strip()):
            raise ValueError("time must be HH:MM or HH:MM:SS")
        return normalize_time(value.strip())

    @field_validator("days_of_week")
    @classmethod
    def _weekdays(cls, value: list[int]) -> list[int]:
        if any(day < 0 or day > 6 for day in value):
            raise ValueError("days_of_week values must be between 0 (Sunday) and 6")
        return sorted(set(value))

    @field_validator("school_year", mode="before")
    @classmethod
    def _trim_school_year(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _end_after_start(self) -> ScheduleIn:
        if time_to_minutes(self.end_time) <= time_to_minutes(self.start_time):
            raise ValueError("end_time must be after start_time")
        return self


class Schedule(ScheduleIn):
    id: str = Field(default_factory=_new_id)
    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("id", mode="before")
    @classmethod
    def _canonical_record_id(cls, value: Any) -> str:
        return normalize_id(value)


class Conflict(BaseModel):
    """One shared resource that makes a candidate collide with an existing slot."""

    model_config = ConfigDict(populate_by_name=True)

    type: ConflictType
    message: str
    conflicting_schedule: Any = Field(default=None, alias="conflictingSchedule")


class SectionIn(BaseModel):
    name: str = Field(min_length=1)
    grade_level: int | None = None
    school_year: str = Field(min_length=1)
    section_type: str | None = None
    adviser_id: str | None = None
    max_students: int | None = Field(default=None, gt=0)
    is_active: bool = True

    @field_validator("name", "school_year", mode="before")
    @classmethod
    def _trim(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("adviser_id", mode="before")
    @classmethod
    def _canonical_adviser(cls, value: Any) -> str | None:
        return normalize_id(value) or None


class Section(SectionIn):
    id: str = Field(default_factory=_new_id)
    created_at: datetime = Field(default_factory=_utcnow)


class Occurrence(BaseModel):
    schedule_id: str
    date: date
    start: datetime
    end: datetime


class ActivityEntry(BaseModel):
    id: str = Field(default_factory=_new_id)
    record_id: str
    timestamp: datetime = Field(default_factory=_utcnow)
    type: ActivityType
    payload: dict = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class ConflictCheckRequest(BaseModel):
    schedule: ScheduleIn
    exclude_id: str | None = None

    @field_validator("exclude_id", mode="before")
    @classmethod
    def _canonical_exclude(cls, value: Any) -> str | None:
        return normalize_id(value) or None


class ConflictCheckResponse(BaseModel):
    conflicts: list[Conflict] = Field(default_factory=list)

    @computed_field
    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)


class DuplicateScheduleRequest(BaseModel):
    """Target year for the copy; defaults to the year after the source's."""

    school_year: str | None = Field(default=None, min_length=1)

    @field_validator("school_year", mode="before")
    @classmethod
    def _trim(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class DuplicateSectionRequest(BaseModel):
    name: str = Field(min_length=1)
    school_year: str | None = Field(default=None, min_length=1)

    @field_validator("name", "school_year", mode="before")
    @classmethod
    def _trim(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class DuplicateSectionResponse(BaseModel):
    section: Section
    schedules: list[Schedule] = Field(default_factory=list)


class GradeAccessResponse(BaseModel):
    teacher_id: str
    section_id: str
    subject_id: str
    school_year: str
    allowed: bool


class SchoolYearsResponse(BaseModel):
    current: str
    options: list[str]

"""In-memory repositories for schedules, sections and the activity trail."""

from __future__ import annotations

from schoolsched.domain.models import ActivityEntry, Schedule, Section
from schoolsched.domain.normalize import normalize_id


class ScheduleRepository:
    """Dict-backed store for Schedule instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Schedule] = {}

    def add(self, schedule: Schedule) -> None:
        self._store[schedule.id] = schedule

    def add_many(self, schedules: list[Schedule]) -> None:
        for schedule in schedules:
            self.add(schedule)

    def get(self, schedule_id: str | int) -> Schedule | None:
        return self._store.get(normalize_id(schedule_id))

    def list_all(self) -> list[Schedule]:
        return list(self._store.values())

    def list_for_school_year(self, school_year: str) -> list[Schedule]:
        year = school_year.strip()
        return [s for s in self._store.values() if s.school_year == year]

    def list_for_section(
        self, section_id: str | int, school_year: str | None = None
    ) -> list[Schedule]:
        section = normalize_id(section_id)
        return [
            s
            for s in self._store.values()
            if s.section_id == section
            and (school_year is None or s.school_year == school_year.strip())
        ]

    def update(self, schedule: Schedule) -> None:
        if schedule.id in self._store:
            self._store[schedule.id] = schedule

    def delete(self, schedule_id: str | int) -> None:
        self._store.pop(normalize_id(schedule_id), None)


class SectionRepository:
    """Dict-backed store for Section instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Section] = {}

    def add(self, section: Section) -> None:
        self._store[section.id] = section

    def get(self, section_id: str | int) -> Section | None:
        return self._store.get(normalize_id(section_id))

    def list_all(self) -> list[Section]:
        return list(self._store.values())


class ActivityRepository:
    """List-backed store for ActivityEntry instances."""

    def __init__(self) -> None:
        self._entries: list[ActivityEntry] = []

    def add(self, entry: ActivityEntry) -> None:
        self._entries.append(entry)

    def list_for_record(self, record_id: str) -> list[ActivityEntry]:
        return sorted(
            [e for e in self._entries if e.record_id == record_id],
            key=lambda e: e.timestamp,
        )

"""Exceptions raised by the schedule services."""

from __future__ import annotations

from schoolsched.domain.models import Conflict


class ScheduleConflictError(Exception):
    """A proposed schedule collides with existing ones and was not saved."""

    def __init__(self, conflicts: list[Conflict], message: str | None = None) -> None:
        self.conflicts = conflicts
        self.message = message or (
            "Conflicts detected: " + ", ".join(c.type for c in conflicts)
        )
        super().__init__(self.message)

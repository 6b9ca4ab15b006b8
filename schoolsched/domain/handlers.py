"""Domain event handlers that keep the activity trail, wired up at startup."""

from __future__ import annotations

import logging

from schoolsched.domain.bus import EventBus
from schoolsched.domain.events import (
    ConflictRejected,
    ScheduleCreated,
    ScheduleDeleted,
    ScheduleDuplicated,
    ScheduleUpdated,
    SectionDuplicated,
)
from schoolsched.domain.models import ActivityEntry, ActivityType
from schoolsched.repos.memory import ActivityRepository, ScheduleRepository

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Wires domain-event handlers to the bus with access to the repositories."""

    def __init__(
        self,
        bus: EventBus,
        schedule_repo: ScheduleRepository,
        activity_repo: ActivityRepository,
    ) -> None:
        self.bus = bus
        self.schedule_repo = schedule_repo
        self.activity_repo = activity_repo
        self._register()

    def _register(self) -> None:
        self.bus.route(
            {
                ScheduleCreated: self.on_schedule_created,
                ScheduleUpdated: self.on_schedule_updated,
                ScheduleDeleted: self.on_schedule_deleted,
                ScheduleDuplicated: self.on_schedule_duplicated,
                SectionDuplicated: self.on_section_duplicated,
                ConflictRejected: self.on_conflict_rejected,
            }
        )

    def _record(self, record_id: str, kind: ActivityType, **payload) -> None:
        self.activity_repo.add(
            ActivityEntry(record_id=record_id, type=kind, payload=payload)
        )
        logger.info("%s %s %s", kind, record_id, payload or "")

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_schedule_created(self, event: ScheduleCreated) -> None:
        stored = self.schedule_repo.get(event.schedule_id)
        if stored is None:
            return
        self._record(
            stored.id,
            ActivityType.SCHEDULE_CREATED,
            school_year=stored.school_year,
            section_id=stored.section_id,
        )

    def on_schedule_updated(self, event: ScheduleUpdated) -> None:
        stored = self.schedule_repo.get(event.schedule_id)
        if stored is None:
            return
        self._record(stored.id, ActivityType.SCHEDULE_UPDATED)

    def on_schedule_deleted(self, event: ScheduleDeleted) -> None:
        self._record(event.schedule_id, ActivityType.SCHEDULE_DELETED)

    def on_schedule_duplicated(self, event: ScheduleDuplicated) -> None:
        # Logged against both the source and the copy.
        for record_id in (event.source_id, event.schedule_id):
            self._record(
                record_id,
                ActivityType.SCHEDULE_DUPLICATED,
                source_id=event.source_id,
                schedule_id=event.schedule_id,
                school_year=event.school_year,
            )

    def on_section_duplicated(self, event: SectionDuplicated) -> None:
        for record_id in (event.source_id, event.section_id):
            self._record(
                record_id,
                ActivityType.SECTION_DUPLICATED,
                source_id=event.source_id,
                section_id=event.section_id,
                schedule_ids=event.schedule_ids,
                school_year=event.school_year,
            )

    def on_conflict_rejected(self, event: ConflictRejected) -> None:
        if event.record_id is None:
            logger.info(
                "%s rejected: %s", event.action, ", ".join(event.conflict_types)
            )
            return
        self._record(
            event.record_id,
            ActivityType.CONFLICT_REJECTED,
            action=event.action,
            conflict_types=event.conflict_types,
            conflicting_schedule_ids=event.conflicting_schedule_ids,
        )

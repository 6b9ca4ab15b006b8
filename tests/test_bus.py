"""Tests for the in-process domain event bus."""

from __future__ import annotations

from schoolsched.domain.bus import EventBus
from schoolsched.domain.events import ScheduleCreated, ScheduleDeleted


def test_publish_reaches_handlers_in_order():
    bus = EventBus()
    seen: list[str] = []
    bus.subscribe(ScheduleCreated, lambda e: seen.append(f"first:{e.schedule_id}"))
    bus.subscribe(ScheduleCreated, lambda e: seen.append(f"second:{e.schedule_id}"))

    delivered = bus.publish(ScheduleCreated(schedule_id="s1"))

    assert delivered == 2
    assert seen == ["first:s1", "second:s1"]


def test_route_table_subscribes_by_exact_type():
    bus = EventBus()
    seen: list[object] = []
    bus.route({ScheduleCreated: seen.append, ScheduleDeleted: seen.append})

    bus.publish(ScheduleDeleted(schedule_id="s2"))

    assert seen == [ScheduleDeleted(schedule_id="s2")]


def test_publish_without_handlers():
    assert EventBus().publish(ScheduleCreated(schedule_id="s1")) == 0

"""Expand a weekly schedule into dated class meetings for calendar views."""

from __future__ import annotations

from datetime import date, datetime, time

from dateutil.rrule import FR, MO, SA, SU, TH, TU, WE, WEEKLY, rrule

from schoolsched.domain.models import Occurrence, Schedule

# days_of_week uses 0 = Sunday, dateutil uses its own weekday constants.
_WEEKDAYS = [SU, MO, TU, WE, TH, FR, SA]


def _parse_hhmm(value: str) -> time:
    hours, minutes = value.split(":")[:2]
    return time(int(hours), int(minutes))


def expand_occurrences(schedule: Schedule, start: date, end: date) -> list[Occurrence]:
    """Return every meeting of *schedule* between *start* and *end* inclusive.

    Occurrences are naive local datetimes, ordered by date.
    """
    if end < start or not schedule.days_of_week:
        return []

    starts_at = _parse_hhmm(schedule.start_time)
    ends_at = _parse_hhmm(schedule.end_time)
    rule = rrule(
        WEEKLY,
        dtstart=datetime.combine(start, starts_at),
        until=datetime.combine(end, starts_at),
        byweekday=[_WEEKDAYS[day] for day in schedule.days_of_week],
    )
    return [
        Occurrence(
            schedule_id=schedule.id,
            date=dt.date(),
            start=dt,
            end=datetime.combine(dt.date(), ends_at),
        )
        for dt in rule
    ]

"""Display helpers for weekdays and time ranges (0 = Sunday ... 6 = Saturday)."""

from __future__ import annotations

from collections.abc import Iterable

DAY_ABBREVIATIONS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
DAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]
UNKNOWN_DAY = "Unknown"


def _valid_day(day: object) -> bool:
    return isinstance(day, int) and not isinstance(day, bool) and 0 <= day <= 6


def format_days(days: Iterable[int]) -> str:
    """Render day numbers as ``"Mon, Wed, Fri"``, sorted and without repeats.

    Values outside 0-6 are left out. The input is not modified.
    """
    return ", ".join(DAY_ABBREVIATIONS[day] for day in sorted(set(days)) if _valid_day(day))


def format_time_range(start_time: str, end_time: str) -> str:
    return f"{start_time} - {end_time}"


def get_day_name(day: int) -> str:
    if not _valid_day(day):
        return UNKNOWN_DAY
    return DAY_NAMES[day]

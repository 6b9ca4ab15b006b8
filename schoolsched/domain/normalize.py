"""Canonical forms for identifiers and times of day.

Schedule records reach us from forms, JSON payloads and storage rows, so the same
logical value can show up as ``7`` or ``"7"``, ``"08:00"`` or ``"08:00:00"``. Every
comparison goes through these helpers on *both* sides.
"""

from __future__ import annotations

from typing import Any


def normalize_id(value: Any) -> str:
    """Return the canonical string form of an identifier.

    ``None`` becomes ``""``; ``7``, ``7.0`` and ``" 7 "`` all become ``"7"``.
    """
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def normalize_time(value: Any) -> Any:
    """Drop the seconds from an ``HH:MM:SS`` time, leaving ``HH:MM``.

    Anything without a colon (including ``""`` and non-strings) is returned unchanged.
    """
    if not isinstance(value, str) or ":" not in value:
        return value
    return ":".join(value.split(":")[:2])


def time_to_minutes(value: Any) -> int | None:
    """Minutes since midnight for an ``HH:MM`` string, or ``None`` if unreadable."""
    if not isinstance(value, str) or ":" not in value:
        return None
    hours, _, rest = value.partition(":")
    minutes = rest.split(":", 1)[0]
    try:
        return int(hours) * 60 + int(minutes)
    except ValueError:
        return None

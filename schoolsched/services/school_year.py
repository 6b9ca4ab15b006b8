"""School-year labels such as ``"2024-2025"``."""

from __future__ import annotations

import re
from datetime import datetime

from schoolsched.config import settings

_LABEL_RE = re.compile(r"^(\d{4})-(\d{4})$")


def current_school_year(now: datetime, start_month: int | None = None) -> str:
    """Return the school year *now* falls in.

    A new school year starts on the first day of *start_month* (June by default).
    """
    start_month = start_month or settings.school_year_start_month
    year = now.year if now.month >= start_month else now.year - 1
    return f"{year}-{year + 1}"


def school_year_options(
    now: datetime,
    years_before: int | None = None,
    years_after: int | None = None,
) -> list[str]:
    """Consecutive school-year labels around the current calendar year."""
    if years_before is None:
        years_before = settings.school_year_options_before
    if years_after is None:
        years_after = settings.school_year_options_after
    return [
        f"{now.year + offset}-{now.year + offset + 1}"
        for offset in range(-years_before, years_after + 1)
    ]


def next_school_year(label: str) -> str:
    """``"2024-2025"`` -> ``"2025-2026"``."""
    m = _LABEL_RE.match(label.strip())
    if not m or int(m.group(2)) != int(m.group(1)) + 1:
        raise ValueError(f"Not a school year label: {label!r}")
    start = int(m.group(2))
    return f"{start}-{start + 1}"

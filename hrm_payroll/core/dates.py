"""Calendar helpers shared by the attendance and leave calculations."""
from __future__ import annotations

import calendar
import math
from datetime import date, datetime
from typing import Any

from hrm_payroll.core.validation import validate_span

MONTH_NAMES: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_MONTH_LOOKUP = {name.lower(): index for index, name in enumerate(MONTH_NAMES, start=1)}
_MONTH_LOOKUP.update({name[:3].lower(): index for index, name in enumerate(MONTH_NAMES, start=1)})

SECONDS_PER_DAY = 86400


def days_in_month(month: int, year: int) -> int:
    """Return the number of days in ``month`` (1-12) of ``year``."""

    return calendar.monthrange(int(year), int(month))[1]


def month_bounds(month: int, year: int) -> tuple[date, date]:
    year = int(year)
    month = int(month)
    return date(year, month, 1), date(year, month, days_in_month(month, year))


def inclusive_day_span(start: date, end: date) -> int:
    """Count calendar days from ``start`` to ``end`` inclusive.

    Partial days between datetimes round up.  Raises ``InvalidRange`` when
    ``end`` precedes ``start``.
    """

    validate_span(start, end)
    delta = end - start
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY) + 1


def month_name(value: Any) -> str:
    """Map 1-12 (or a digit string) to its English month name.

    Other strings are returned unchanged; anything else maps to ``""``.
    """

    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, int):
        return MONTH_NAMES[value - 1] if 1 <= value <= 12 else ""
    if isinstance(value, float):
        return month_name(int(value)) if value.is_integer() else ""
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.isdigit():
            return month_name(int(stripped))
        return value
    return ""


def month_number(value: Any) -> int:
    """Inverse of :func:`month_name`; returns ``0`` for unknown input."""

    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value if 1 <= value <= 12 else 0
    text = str(value).strip()
    if text.isdigit():
        return month_number(int(text))
    return _MONTH_LOOKUP.get(text.lower(), 0)


def month_code(value: Any) -> str:
    """Two digit month code (``"02"``) as expected by the payroll backend."""

    number = month_number(value)
    return f"{number:02d}" if number else ""


def parse_date(value: Any) -> date | None:
    """Best-effort conversion of upstream date values to ``date``."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text or "invalid" in text.lower():
        return None
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None

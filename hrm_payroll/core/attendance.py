"""Classification of raw attendance rows."""

from __future__ import annotations

from typing import Any, Iterable

from hrm_payroll.core.schema import AttendanceRecord

# Status strings emitted by the different attendance producers that mean
# the staff member was at work.  Fixed on purpose; not runtime configurable.
WORKED_STATUSES = frozenset(
    {
        "present",
        "p",
        "attended",
        "checked-in",
        "active",
        "completed",
        "worked",
        "on-time",
        "checked in",
    }
)


def counts_as_worked(record: AttendanceRecord) -> bool:
    if record.clock_in and record.clock_out:
        return True
    return record.status.strip().lower() in WORKED_STATUSES


def records_for_month(
    records: Iterable[AttendanceRecord | dict[str, Any]],
    month: int,
    year: int,
    staff_id: str | None = None,
) -> list[AttendanceRecord]:
    """Return the readable records dated inside ``month``/``year``.

    Rows without an employee id are kept when ``staff_id`` is given because
    the attendance feed is fetched per staff member.
    """

    selected: list[AttendanceRecord] = []
    for item in records:
        record = AttendanceRecord.coerce(item)
        if record is None or record.date is None:
            continue
        if record.date.month != month or record.date.year != year:
            continue
        if staff_id is not None and record.employee_id and record.employee_id != str(staff_id):
            continue
        selected.append(record)
    return selected


def count_days_worked(
    records: Iterable[AttendanceRecord | dict[str, Any]],
    month: int,
    year: int,
    staff_id: str | None = None,
) -> int:
    return sum(1 for record in records_for_month(records, month, year, staff_id) if counts_as_worked(record))

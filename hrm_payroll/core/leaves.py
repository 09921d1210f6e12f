"""Paid leave overlap with a payroll month."""

from __future__ import annotations

from typing import Any, Iterable

from hrm_payroll.core.dates import inclusive_day_span, month_bounds
from hrm_payroll.core.schema import LeaveRequest
from hrm_payroll.core.validation import InvalidRange
from hrm_payroll.logging_config import get_logger

logger = get_logger(__name__)

HALF_DAY = 0.5


def approved_leaves_for(
    leaves: Iterable[LeaveRequest | dict[str, Any]],
    employee_id: str,
) -> list[LeaveRequest]:
    employee_id = str(employee_id)
    selected: list[LeaveRequest] = []
    for item in leaves:
        leave = LeaveRequest.coerce(item)
        if leave is None or not leave.is_approved:
            continue
        if leave.employee_id != employee_id:
            continue
        selected.append(leave)
    return selected


def paid_leave_days(
    leaves: Iterable[LeaveRequest | dict[str, Any]],
    employee_id: str,
    month: int,
    year: int,
) -> float:
    """Sum the paid leave days of ``employee_id`` falling inside the month.

    Half-day leaves count ``0.5`` regardless of their span.  The result is
    not rounded; :func:`hrm_payroll.core.aggregation.aggregate` rounds it up.
    """

    month_start, month_end = month_bounds(month, year)
    total = 0.0
    for leave in approved_leaves_for(leaves, employee_id):
        if leave.start_date is None or leave.end_date is None:
            continue
        if leave.start_date > month_end or leave.end_date < month_start:
            continue
        if not leave.is_paid:
            continue

        overlap_start = max(leave.start_date, month_start)
        overlap_end = min(leave.end_date, month_end)
        try:
            days = inclusive_day_span(overlap_start, overlap_end)
        except InvalidRange as exc:
            logger.warning(
                "skipping leave with inverted range",
                extra={"employee_id": employee_id, "start": str(exc.start), "end": str(exc.end)},
            )
            continue
        total += HALF_DAY if leave.is_half_day else days
    return total

from __future__ import annotations

import math
from typing import Any, Iterable

from hrm_payroll.core.attendance import count_days_worked
from hrm_payroll.core.dates import days_in_month, month_number
from hrm_payroll.core.leaves import paid_leave_days
from hrm_payroll.core.schema import AttendanceRecord, AttendanceSummary, LeaveRequest


def aggregate(
    staff_id: str,
    month: int | str,
    year: int | str,
    attendance_feed: Iterable[AttendanceRecord | dict[str, Any]],
    leave_feed: Iterable[LeaveRequest | dict[str, Any]],
) -> AttendanceSummary:
    """Summarise worked, paid-leave and unpaid days for one staff month.

    ``month`` accepts 1-12 or an English month name.  Fractional paid leave
    (half days) is rounded up per staff member and month.
    """

    month_num = month_number(month)
    if not month_num:
        raise ValueError(f"unknown month: {month!r}")
    year_num = int(year)
    staff_id = str(staff_id)

    total_days = days_in_month(month_num, year_num)
    days_worked = count_days_worked(attendance_feed, month_num, year_num, staff_id)
    paid_leaves = math.ceil(paid_leave_days(leave_feed, staff_id, month_num, year_num))
    unpaid_days = max(0, total_days - days_worked - paid_leaves)

    return AttendanceSummary(
        staff_id=staff_id,
        month=month_num,
        year=year_num,
        total_days=total_days,
        days_worked=days_worked,
        paid_leaves=paid_leaves,
        unpaid_days=unpaid_days,
    )

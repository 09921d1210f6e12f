"""Merge the staff roster with the payrolls of a period."""

from __future__ import annotations

from typing import Any, Iterable, Literal

from hrm_payroll.core.dates import month_name, month_number
from hrm_payroll.core.schema import Payroll, Staff
from hrm_payroll.domain import ExistingRow, GhostRow, PayrollRow
from hrm_payroll.logging_config import get_logger

logger = get_logger(__name__)

ALL = "All"
GHOST_PREFIX = "temp_"


def _period_value(value: Any) -> str:
    if value is None:
        return ALL
    text = str(value).strip()
    return text or ALL


def is_ghost(value: Payroll | PayrollRow | str) -> bool:
    if isinstance(value, GhostRow):
        return True
    if isinstance(value, ExistingRow):
        value = value.payroll
    record_id = value.id if isinstance(value, Payroll) else str(value or "")
    return record_id.startswith(GHOST_PREFIX)


def ghost_payroll(staff: Staff, month: str, year: str) -> Payroll:
    return Payroll(
        id=f"{GHOST_PREFIX}{staff.id}",
        staff_id=staff.id,
        staff_name=staff.name,
        month=month,
        year=year,
        basic_salary=staff.salary,
        status="Pending",
        branch_id=staff.store_id,
        branch_name=staff.store_name,
        designation=staff.designation,
    )


def merge_rows(
    staff_roster: Iterable[Staff],
    payrolls: Iterable[Payroll],
    month: Any,
    year: Any,
) -> list[PayrollRow]:
    """Return the listing rows for ``month``/``year``.

    With ``"All"`` for either value the payrolls are only filtered by the
    concrete one (history view).  Otherwise the result has exactly one row
    per roster entry, in roster order.
    """

    month = _period_value(month)
    year = _period_value(year)
    if month != ALL:
        month = month_name(month_number(month)) or month
    payrolls = list(payrolls)

    if month == ALL or year == ALL:
        return [
            ExistingRow(payroll)
            for payroll in payrolls
            if (month == ALL or payroll.month == month) and (year == ALL or payroll.year == year)
        ]

    in_period: dict[str, Payroll] = {}
    for payroll in payrolls:
        if payroll.month == month and payroll.year == year:
            in_period.setdefault(payroll.staff_id, payroll)

    rows: list[PayrollRow] = []
    for staff in staff_roster:
        existing = in_period.get(staff.id)
        if existing is not None:
            rows.append(ExistingRow(existing))
        else:
            rows.append(GhostRow(staff.id, month, year, ghost_payroll(staff, month, year)))

    ghosts = sum(1 for row in rows if isinstance(row, GhostRow))
    logger.debug("merged payroll period", extra={"month": month, "year": year, "rows": len(rows), "ghosts": ghosts})
    return rows


def merge(
    staff_roster: Iterable[Staff],
    payrolls: Iterable[Payroll],
    month: Any,
    year: Any,
) -> list[Payroll]:
    return [row.payroll for row in merge_rows(staff_roster, payrolls, month, year)]


def submission_action(row: Payroll | PayrollRow) -> Literal["create", "update"]:
    """Decide whether saving ``row`` creates or updates the upstream record."""

    if isinstance(row, GhostRow):
        return "create"
    if isinstance(row, ExistingRow):
        return "update"
    if not row.id or is_ghost(row):
        return "create"
    return "update"

"""Listing filters and headline figures for a payroll table."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

import pandas as pd

from hrm_payroll.core import name_normalize
from hrm_payroll.core.salary import round2
from hrm_payroll.core.schema import Payroll

SEARCH_FIELDS = ("staff_name", "designation", "branch_name")


def filter_payrolls(
    rows: Iterable[Payroll],
    search: str | None = None,
    status: str | None = "All",
) -> list[Payroll]:
    selected: list[Payroll] = []
    for row in rows:
        if status and status != "All" and row.status != status:
            continue
        if search and not any(name_normalize.contains(getattr(row, field), search) for field in SEARCH_FIELDS):
            continue
        selected.append(row)
    return selected


def _money(value: float) -> Decimal:
    return round2(Decimal(str(value)))


def summarize(rows: Iterable[Payroll]) -> dict[str, object]:
    frame = pd.DataFrame(
        [
            {
                "staff": row.staff_id or row.staff_name,
                "status": row.status,
                "net_salary": float(row.net_salary),
                "basic_salary": float(row.basic_salary),
            }
            for row in rows
        ],
        columns=["staff", "status", "net_salary", "basic_salary"],
    )
    counts = frame["status"].value_counts()
    return {
        "total_payroll": _money(frame["net_salary"].sum()),
        "total_basic": _money(frame["basic_salary"].sum()),
        "pending_count": int(counts.get("Pending", 0)),
        "paid_count": int(counts.get("Paid", 0)),
        "processing_count": int(counts.get("Processing", 0)),
        "total_staff": int(frame["staff"].nunique()),
        "records": int(len(frame)),
    }

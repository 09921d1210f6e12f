"""Canonicalisation of payroll and staff payloads from upstream producers.

Producers disagree on field names (``baseSalary`` vs ``salary``, ``daysWorked``
vs ``presentDays`` ...) and nest employee/store data in different places.
Every canonical field has one resolver holding its ordered fallback chain, so
each chain can be tested on its own.  Normalisation never raises: missing or
unreadable values fall back to zero/empty defaults.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Iterable

from hrm_payroll.core.dates import month_name
from hrm_payroll.core.salary import CENT, round2
from hrm_payroll.core.schema import Payroll, PayrollStatus, SalaryBreakdown, Staff, identifier
from hrm_payroll.core.validation import MalformedRecord, is_balanced, is_bounded
from hrm_payroll.logging_config import get_logger

logger = get_logger(__name__)

ZERO = Decimal("0")

_STATUSES: dict[str, PayrollStatus] = {
    "pending": "Pending",
    "paid": "Paid",
    "processing": "Processing",
}


# ----------------------------------------------------------------------
# primitive coercion
# ----------------------------------------------------------------------
def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _present(value: Any) -> bool:
    return value is not None and value != ""


def _safe_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, (bool, dict, list)):
        return None
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not is_bounded(result):
        return None
    return result


def _first_text(*candidates: Any) -> str:
    for value in candidates:
        if isinstance(value, (dict, list, bool)) or not _present(value):
            continue
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)
    return ""


def _first_number(raw: dict[str, Any], keys: Iterable[str]) -> Decimal | None:
    for key in keys:
        value = _safe_decimal(raw.get(key))
        if value is not None:
            return value
    return None


def _days(raw: dict[str, Any], keys: Iterable[str]) -> float:
    value = _first_number(raw, keys)
    return float(value) if value is not None else 0.0


# ----------------------------------------------------------------------
# nested objects
# ----------------------------------------------------------------------
def _employee(raw: dict[str, Any]) -> dict[str, Any]:
    for key in ("employee", "employeeId", "staffId"):
        value = raw.get(key)
        if value:
            return _mapping(value)
    return {}


def _store(raw: dict[str, Any]) -> dict[str, Any]:
    employee = _employee(raw)
    for value in (employee.get("store"), raw.get("storeId"), raw.get("branchId")):
        if value:
            return _mapping(value)
    return {}


# ----------------------------------------------------------------------
# field resolvers
# ----------------------------------------------------------------------
def resolve_id(raw: dict[str, Any]) -> str:
    return _first_text(raw.get("_id"), raw.get("id"))


def resolve_staff_id(raw: dict[str, Any]) -> str:
    employee = _employee(raw)
    return _first_text(
        identifier(employee),
        identifier(raw.get("staffId")),
        identifier(raw.get("employeeId")),
    )


def resolve_staff_name(raw: dict[str, Any]) -> str:
    employee = _employee(raw)
    user = _mapping(employee.get("user"))
    return _first_text(raw.get("staffName"), user.get("name"), employee.get("fullName"), employee.get("name"))


def resolve_branch_id(raw: dict[str, Any]) -> str:
    return _first_text(
        identifier(_store(raw)),
        identifier(raw.get("branchId")),
        identifier(raw.get("storeId")),
    )


def resolve_branch_name(raw: dict[str, Any]) -> str:
    return _first_text(raw.get("branchName"), raw.get("storeName"), _store(raw).get("name"))


def resolve_designation(raw: dict[str, Any]) -> str:
    return _first_text(raw.get("designation"), _employee(raw).get("designation"))


def resolve_month(raw: dict[str, Any]) -> str:
    return month_name(raw.get("month"))


def resolve_year(raw: dict[str, Any]) -> str:
    return _first_text(raw.get("year"))


def resolve_basic_salary(raw: dict[str, Any]) -> Decimal:
    return _first_number(raw, ("baseSalary", "basicSalary", "salary")) or ZERO


def resolve_raw_deductions(raw: dict[str, Any]) -> Decimal:
    return _first_number(raw, ("deduction", "deductions")) or ZERO


def resolve_raw_net_salary(raw: dict[str, Any]) -> Decimal | None:
    return _first_number(raw, ("netSalary", "totalSalary"))


def resolve_days_worked(raw: dict[str, Any]) -> float:
    return _days(raw, ("daysWorked", "days_worked", "presentDays", "present_days", "paidDays"))


def resolve_total_days(raw: dict[str, Any]) -> float:
    return _days(raw, ("totalDays", "total_days", "totalWorkingDays", "workingDays"))


def resolve_paid_leaves(raw: dict[str, Any]) -> float:
    return _days(raw, ("paidLeaves", "paid_leaves"))


def resolve_unpaid_days(raw: dict[str, Any]) -> float:
    return _days(raw, ("unpaidDays", "unpaid_days"))


def resolve_status(raw: dict[str, Any]) -> PayrollStatus:
    value = _first_text(raw.get("status"), raw.get("paymentStatus"), raw.get("payment_status"))
    return _STATUSES.get(value.strip().lower(), "Pending")


# ----------------------------------------------------------------------
# net salary / deductions repair
# ----------------------------------------------------------------------
def resolve_net_and_deductions(
    basic_salary: Decimal,
    raw_net: Decimal | None,
    raw_deductions: Decimal,
) -> tuple[SalaryBreakdown, bool]:
    """Return the net/deduction pair and whether the inputs were transposed.

    Some producers write the net salary into the deduction field and vice
    versa.  The pair is treated as swapped when either value exceeds the
    basic salary, or when the swapped reading reconciles with the basic
    salary strictly better than the stored one (within one cent).
    """

    if raw_net is None or basic_salary <= 0:
        net = max(ZERO, basic_salary - raw_deductions)
        return SalaryBreakdown(net_salary=net, deductions=raw_deductions), False

    current_gap = abs(raw_net + raw_deductions - basic_salary)
    swapped_net, swapped_deductions = raw_deductions, raw_net
    swapped_gap = abs(swapped_net + swapped_deductions - basic_salary)

    swapped = (
        raw_net > basic_salary
        or raw_deductions > basic_salary
        or (swapped_gap < current_gap and swapped_gap < CENT)
    )
    if swapped:
        return SalaryBreakdown(net_salary=swapped_net, deductions=swapped_deductions), True
    return SalaryBreakdown(net_salary=raw_net, deductions=raw_deductions), False


# ----------------------------------------------------------------------
# public API
# ----------------------------------------------------------------------
def _check_record(raw: Any) -> None:
    if not isinstance(raw, dict):
        raise MalformedRecord(f"expected an object, got {type(raw).__name__}")
    if not resolve_id(raw):
        raise MalformedRecord("payroll record has no id")


def normalize(raw: Any) -> Payroll:
    """Build a canonical :class:`Payroll` from an arbitrary upstream object."""

    try:
        _check_record(raw)
    except MalformedRecord as exc:
        logger.debug("normalising degenerate payroll record", extra={"reason": str(exc)})
    raw = _mapping(raw)

    record_id = resolve_id(raw)
    basic_salary = resolve_basic_salary(raw)
    raw_net = resolve_raw_net_salary(raw)
    raw_deductions = resolve_raw_deductions(raw)
    breakdown, swapped = resolve_net_and_deductions(basic_salary, raw_net, raw_deductions)
    if swapped:
        logger.warning(
            "net salary and deductions look transposed; swapping",
            extra={
                "payroll_id": record_id,
                "basic_salary": basic_salary,
                "raw_net_salary": raw_net,
                "raw_deductions": raw_deductions,
            },
        )
    if not is_balanced(basic_salary, breakdown.net_salary, breakdown.deductions):
        logger.debug(
            "payroll does not reconcile with basic salary",
            extra={"payroll_id": record_id, "basic_salary": basic_salary},
        )

    return Payroll(
        id=record_id,
        staff_id=resolve_staff_id(raw),
        staff_name=resolve_staff_name(raw),
        month=resolve_month(raw),
        year=resolve_year(raw),
        basic_salary=basic_salary,
        days_worked=resolve_days_worked(raw),
        total_days=resolve_total_days(raw),
        paid_leaves=resolve_paid_leaves(raw),
        unpaid_days=resolve_unpaid_days(raw),
        deductions=breakdown.deductions,
        net_salary=breakdown.net_salary,
        status=resolve_status(raw),
        paid_at=_first_text(raw.get("paidAt")) or None,
        branch_id=resolve_branch_id(raw),
        branch_name=resolve_branch_name(raw),
        designation=resolve_designation(raw),
        remarks=_first_text(raw.get("remarks")),
        created_at=_first_text(raw.get("createdAt")),
        updated_at=_first_text(raw.get("updatedAt")),
    )


def _unwrap(payload: Any, paths: Iterable[tuple[str, ...]]) -> list[Any]:
    if isinstance(payload, list):
        return payload
    for path in paths:
        node: Any = payload
        for key in path:
            node = node.get(key) if isinstance(node, dict) else None
        if isinstance(node, list):
            return node
    return []


_PAYROLL_ENVELOPES = (
    ("data", "data", "payrolls"),
    ("data", "payrolls"),
    ("payrolls",),
    ("data",),
    ("results",),
)

_STAFF_ENVELOPES = (
    ("data",),
    ("data", "employees"),
)


def extract_payrolls(payload: Any) -> list[Payroll]:
    """Normalise every identifiable payroll in an API payload."""

    items = _unwrap(payload, _PAYROLL_ENVELOPES)
    return [normalize(item) for item in items if isinstance(item, dict) and resolve_id(item)]


def normalize_staff(raw: dict[str, Any]) -> Staff:
    user = _mapping(raw.get("user"))
    store = _mapping(raw.get("storeId"))
    staff_id = resolve_id(raw)
    status = _first_text(raw.get("status")) or "Active"
    return Staff(
        id=staff_id,
        name=_first_text(raw.get("name"), raw.get("fullName"), user.get("name")),
        email=_first_text(raw.get("email"), user.get("email")),
        phone=_first_text(raw.get("phone"), user.get("phone")),
        designation=_first_text(raw.get("designation")),
        store_id=_first_text(identifier(store), identifier(raw.get("storeId"))),
        store_name=_first_text(raw.get("storeName"), store.get("name")),
        salary=round2(_first_number(raw, ("salary",)) or ZERO),
        join_date=_first_text(raw.get("joiningDate"), raw.get("joinDate")),
        status=status,
        created_at=_first_text(raw.get("createdAt")),
        updated_at=_first_text(raw.get("updatedAt")),
    )


def extract_staff(payload: Any) -> list[Staff]:
    items = _unwrap(payload, _STAFF_ENVELOPES)
    return [normalize_staff(item) for item in items if isinstance(item, dict) and resolve_id(item)]

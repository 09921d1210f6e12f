from __future__ import annotations

from decimal import MAX_EMAX, MIN_EMIN, ROUND_HALF_UP, Decimal, getcontext, localcontext
from typing import Any

from hrm_payroll.core.schema import SalaryBreakdown

CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _precision(*values: Decimal) -> int:
    # enough digits to keep every integer digit plus the cents
    return max([getcontext().prec] + [value.adjusted() + 4 for value in values if value.is_finite()])


def round2(value: Decimal) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = _precision(value)
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


def compute(
    basic_salary: Any,
    total_days: Any,
    days_worked: Any,
    paid_leaves: Any,
) -> SalaryBreakdown:
    """Prorate ``basic_salary`` over the payable days of the month.

    Payable days are ``days_worked + paid_leaves``, held within
    ``0..total_days``; the remainder of the basic salary is reported as
    deductions, so both always add back up to it and neither is negative.
    """

    zero = SalaryBreakdown(net_salary=Decimal("0.00"), deductions=Decimal("0.00"))
    values = [to_decimal(value) for value in (basic_salary, total_days, days_worked, paid_leaves)]
    if not all(value.is_finite() for value in values):
        return zero
    basic, total, worked, leaves = values
    if basic <= 0 or total <= 0:
        return zero

    with localcontext() as ctx:
        ctx.prec = _precision(*values) + getcontext().prec
        ctx.Emax = MAX_EMAX
        ctx.Emin = MIN_EMIN
        payable_days = min(max(worked + leaves, Decimal("0")), total)
        net_salary = round2(basic * payable_days / total)
        deductions = round2(basic - net_salary)
    return SalaryBreakdown(net_salary=net_salary, deductions=deductions)

from __future__ import annotations

from decimal import Decimal
from typing import Any


class PayrollError(Exception):
    """Base class for payroll engine errors."""


class InvalidRange(PayrollError, ValueError):
    """Raised when a day span ends before it starts."""

    def __init__(self, start: Any, end: Any) -> None:
        super().__init__(f"end {end} is before start {start}")
        self.start = start
        self.end = end


class DataUnavailable(PayrollError):
    """Raised when an upstream feed cannot be fetched."""


class MalformedRecord(PayrollError):
    """Raised when a raw payroll record is too degenerate to normalise."""


SUM_TOLERANCE = Decimal("0.01")


def is_balanced(basic_salary: Decimal, net_salary: Decimal, deductions: Decimal) -> bool:
    """Check ``net + deductions == basic`` within one cent."""

    if basic_salary <= 0:
        return True
    return abs(net_salary + deductions - basic_salary) <= SUM_TOLERANCE


def validate_span(start: Any, end: Any) -> None:
    if end < start:
        raise InvalidRange(start, end)


# Largest decimal exponent accepted from upstream amounts and day counts.
MAX_AMOUNT_EXPONENT = 15


def is_bounded(value: Decimal) -> bool:
    """True for finite values below ``10 ** (MAX_AMOUNT_EXPONENT + 1)``."""

    return value.is_finite() and value.adjusted() <= MAX_AMOUNT_EXPONENT

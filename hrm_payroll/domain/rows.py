"""Rows of a payroll period listing."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from hrm_payroll.core.schema import Payroll


@dataclass(frozen=True, slots=True)
class ExistingRow:
    """A payroll record that already exists upstream."""

    payroll: Payroll


@dataclass(frozen=True, slots=True)
class GhostRow:
    """Placeholder for a staff member without a payroll in the period.

    Saving a ghost must create the record upstream, never update it.
    """

    staff_id: str
    month: str
    year: str
    payroll: Payroll


PayrollRow = Union[ExistingRow, GhostRow]

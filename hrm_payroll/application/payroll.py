"""Application service layer for payroll use cases."""
from __future__ import annotations

from decimal import Decimal
from typing import Any

from hrm_payroll.core.aggregation import aggregate
from hrm_payroll.core.dates import month_code, month_name, month_number
from hrm_payroll.core.merger import ALL, merge, submission_action
from hrm_payroll.core.normalizer import extract_payrolls, extract_staff
from hrm_payroll.core.reports import filter_payrolls, summarize
from hrm_payroll.core.salary import compute
from hrm_payroll.core.schema import AttendanceSummary, Payroll, PayrollPreview, Staff
from hrm_payroll.core.validation import DataUnavailable
from hrm_payroll.infrastructure import FeedClient, get_feed_client
from hrm_payroll.logging_config import get_logger

logger = get_logger(__name__)


class PayrollService:
    """Coordinates feed access with the pure payroll engine."""

    def __init__(self, feeds: FeedClient | None = None) -> None:
        self._feeds = feeds

    @property
    def feeds(self) -> FeedClient:
        return self._feeds or get_feed_client()

    # ------------------------------------------------------------------
    # attendance
    # ------------------------------------------------------------------
    def attendance_summary(self, staff_id: str, month: Any, year: Any) -> AttendanceSummary | None:
        """Aggregate a staff month; ``None`` when a feed could not be fetched."""

        try:
            attendance = self.feeds.fetch_attendance(staff_id)
            leaves = self.feeds.fetch_leaves()
        except DataUnavailable as exc:
            logger.warning(
                "attendance summary unavailable",
                extra={"staff_id": staff_id, "period": f"{month} {year}", "reason": str(exc)},
            )
            return None
        return aggregate(staff_id, month, year, attendance, leaves)

    def preview(
        self,
        staff_id: str,
        month: Any,
        year: Any,
        basic_salary: Decimal | float | None = None,
    ) -> PayrollPreview | None:
        summary = self.attendance_summary(staff_id, month, year)
        if summary is None:
            return None

        if basic_salary is None:
            staff = self.find_staff(staff_id)
            basic_salary = staff.salary if staff else Decimal("0")
        salary = compute(basic_salary, summary.total_days, summary.days_worked, summary.paid_leaves)

        return PayrollPreview(
            staff_id=summary.staff_id,
            month=month_name(summary.month),
            year=str(summary.year),
            basic_salary=Decimal(str(basic_salary)),
            total_days=summary.total_days,
            days_worked=summary.days_worked,
            paid_leaves=summary.paid_leaves,
            unpaid_days=summary.unpaid_days,
            net_salary=salary.net_salary,
            deductions=salary.deductions,
        )

    # ------------------------------------------------------------------
    # listings
    # ------------------------------------------------------------------
    def list_staff(self) -> list[Staff]:
        return extract_staff(self.feeds.fetch_staff())

    def find_staff(self, staff_id: str) -> Staff | None:
        return next((staff for staff in self.list_staff() if staff.id == str(staff_id)), None)

    def list_payrolls(
        self,
        month: Any = ALL,
        year: Any = ALL,
        *,
        status: str | None = ALL,
        search: str | None = None,
    ) -> list[Payroll]:
        payrolls = extract_payrolls(self.feeds.fetch_payrolls())
        staff: list[Staff] = []
        if str(month) != ALL and str(year) != ALL:
            staff = self.list_staff()
        rows = merge(staff, payrolls, month, year)
        return filter_payrolls(rows, search=search, status=status)

    def summary(self, month: Any = ALL, year: Any = ALL) -> dict[str, object]:
        return summarize(self.list_payrolls(month, year))

    # ------------------------------------------------------------------
    # submission
    # ------------------------------------------------------------------
    @staticmethod
    def backend_payload(payroll: Payroll) -> dict[str, Any]:
        """Shape a payroll row the way the HR backend stores it."""

        salary = compute(payroll.basic_salary, payroll.total_days, payroll.days_worked, payroll.paid_leaves)
        if payroll.basic_salary > 0 and payroll.total_days > 0:
            net_salary, deductions = salary.net_salary, salary.deductions
        else:
            net_salary, deductions = payroll.net_salary, payroll.deductions
        return {
            "staffId": payroll.staff_id,
            "month": month_code(payroll.month) or payroll.month,
            "year": payroll.year,
            "basicSalary": float(payroll.basic_salary),
            "daysWorked": payroll.days_worked,
            "totalDays": payroll.total_days,
            "paidLeaves": payroll.paid_leaves,
            "unpaidDays": payroll.unpaid_days,
            "deductions": float(deductions),
            "netSalary": float(net_salary),
            "remarks": payroll.remarks,
            "status": payroll.status,
        }

    def submit(self, payroll: Payroll) -> dict[str, Any]:
        """Create or update ``payroll`` upstream depending on whether it is a ghost."""

        if not payroll.staff_id:
            raise ValueError("staffId is required")
        if not month_number(payroll.month) or not payroll.year:
            raise ValueError("month and year are required")

        action = submission_action(payroll)
        body = self.backend_payload(payroll)
        if action == "create":
            result = self.feeds.create_payroll(body)
        else:
            result = self.feeds.update_payroll(payroll.id, body)
        logger.info(
            "payroll submitted",
            extra={"action": action, "payroll_id": payroll.id, "staff_id": payroll.staff_id},
        )
        return {"action": action, "result": result}


_service = PayrollService()


def get_payroll_service() -> PayrollService:
    """Return the singleton payroll service for the process."""

    return _service


def reset_payroll_service(feeds: FeedClient | None = None) -> PayrollService:
    """Replace the singleton (used in tests)."""

    global _service
    _service = PayrollService(feeds)
    return _service

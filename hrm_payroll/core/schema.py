from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Annotated, Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PlainSerializer, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from hrm_payroll.core.dates import month_name, parse_date

PayrollStatus = Literal["Pending", "Paid", "Processing"]

# Decimal internally, a JSON number on the wire.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

ATTENDANCE_STATUSES = ("Present", "Absent", "Late", "HalfDay", "OnLeave", "Holiday", "NoShow")


def identifier(value: Any) -> str:
    """Resolve an id that may be a scalar or a nested ``{_id|id}`` object."""

    if isinstance(value, dict):
        value = value.get("_id") or value.get("id")
    if value is None or isinstance(value, (bool, dict, list)):
        return ""
    return str(value)


def _optional_text(value: Any) -> str | None:
    if value is None or value is False or value == "":
        return None
    return str(value)


class _FeedModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @classmethod
    def coerce(cls, item: Any):
        """Build from a model or raw mapping; ``None`` when it cannot be read."""

        if isinstance(item, cls):
            return item
        if not isinstance(item, dict):
            return None
        try:
            return cls.model_validate(item)
        except ValidationError:
            return None


class AttendanceRecord(_FeedModel):
    employee_id: str = Field(
        default="",
        validation_alias=AliasChoices("employeeId", "employee_id", "staffId", "staff_id", "employee"),
    )
    date: dt.date | None = Field(
        default=None,
        validation_alias=AliasChoices("attendanceDate", "date", "attendance_date", "createdAt"),
    )
    status: str = Field(
        default="",
        validation_alias=AliasChoices("status", "statusDisplay", "attendanceStatus", "attendanceStatusDisplay"),
    )
    clock_in: str | None = Field(
        default=None,
        validation_alias=AliasChoices("clockIn", "clock_in", "clockInTime", "checkIn", "checkInTime"),
    )
    clock_out: str | None = Field(
        default=None,
        validation_alias=AliasChoices("clockOut", "clock_out", "clockOutTime", "checkOut", "checkOutTime"),
    )

    @field_validator("employee_id", mode="before")
    @classmethod
    def resolve_employee(cls, value: Any) -> str:
        return identifier(value)

    @field_validator("date", mode="before")
    @classmethod
    def resolve_date(cls, value: Any) -> dt.date | None:
        return parse_date(value)

    @field_validator("clock_in", "clock_out", mode="before")
    @classmethod
    def resolve_clock(cls, value: Any) -> str | None:
        return _optional_text(value)

    @field_validator("status", mode="before")
    @classmethod
    def resolve_status(cls, value: Any) -> str:
        return "" if value is None else str(value)


class LeaveRequest(_FeedModel):
    employee_id: str = Field(
        default="",
        validation_alias=AliasChoices("employeeId", "employee_id", "staffId", "staff_id"),
    )
    start_date: dt.date | None = Field(default=None, validation_alias=AliasChoices("startDate", "start_date"))
    end_date: dt.date | None = Field(default=None, validation_alias=AliasChoices("endDate", "end_date"))
    status: str = "Pending"
    is_paid: bool = Field(default=True, validation_alias=AliasChoices("isPaid", "is_paid"))
    is_half_day: bool = Field(default=False, validation_alias=AliasChoices("isHalfDay", "is_half_day"))

    @field_validator("employee_id", mode="before")
    @classmethod
    def resolve_employee(cls, value: Any) -> str:
        return identifier(value)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def resolve_dates(cls, value: Any) -> dt.date | None:
        return parse_date(value)

    @field_validator("status", mode="before")
    @classmethod
    def resolve_status(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("is_paid", mode="before")
    @classmethod
    def resolve_paid(cls, value: Any) -> bool:
        # paid unless explicitly false
        return value is not False

    @field_validator("is_half_day", mode="before")
    @classmethod
    def resolve_half_day(cls, value: Any) -> bool:
        return bool(value)

    @property
    def is_approved(self) -> bool:
        return self.status.strip().lower() == "approved"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AttendanceSummary(_CamelModel):
    staff_id: str
    month: int
    year: int
    total_days: int
    days_worked: int
    paid_leaves: int
    unpaid_days: int


class SalaryBreakdown(_CamelModel):
    net_salary: Money = Decimal("0")
    deductions: Money = Decimal("0")


class Staff(_CamelModel):
    id: str
    name: str = ""
    email: str = ""
    phone: str = ""
    designation: str = ""
    store_id: str = ""
    store_name: str = ""
    salary: Money = Decimal("0")
    join_date: str = ""
    status: str = "Active"
    created_at: str = ""
    updated_at: str = ""


class Payroll(_CamelModel):
    id: str = ""
    staff_id: str = ""
    staff_name: str = ""
    month: str = ""
    year: str = ""
    basic_salary: Money = Decimal("0")
    days_worked: float = 0
    total_days: float = 0
    paid_leaves: float = 0
    unpaid_days: float = 0
    deductions: Money = Decimal("0")
    net_salary: Money = Decimal("0")
    status: PayrollStatus = "Pending"
    paid_at: str | None = None
    branch_id: str = ""
    branch_name: str = ""
    designation: str = ""
    remarks: str = ""
    created_at: str = ""
    updated_at: str = ""

    @field_validator("month", mode="before")
    @classmethod
    def resolve_month(cls, value: Any) -> str:
        return month_name(value)

    @field_validator("year", mode="before")
    @classmethod
    def resolve_year(cls, value: Any) -> str:
        return "" if value is None else str(value)


class PayrollPreview(_CamelModel):
    """Attendance summary plus the salary it yields for one staff month."""

    staff_id: str
    month: str
    year: str
    basic_salary: Money
    total_days: int
    days_worked: int
    paid_leaves: int
    unpaid_days: int
    net_salary: Money
    deductions: Money

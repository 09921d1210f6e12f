import logging
import math
import sys
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from hrm_payroll.core.normalizer import (
    extract_payrolls,
    extract_staff,
    normalize,
    normalize_staff,
    resolve_basic_salary,
    resolve_net_and_deductions,
)


@pytest.mark.parametrize("raw", [{}, None, "garbage", [1, 2], {"_id": None}])
def test_normalize_is_total(raw):
    payroll = normalize(raw)

    assert payroll.id == ""
    assert payroll.month == ""
    assert payroll.status == "Pending"
    for field in ("basic_salary", "net_salary", "deductions", "days_worked", "total_days", "paid_leaves", "unpaid_days"):
        value = getattr(payroll, field)
        assert value == 0
        assert not (isinstance(value, float) and math.isnan(value))


def test_oversized_amounts_fall_back_to_defaults():
    huge = {"_id": "p1", "basicSalary": "9e999999", "netSalary": "9e999999", "deduction": "9e999999", "daysWorked": "1e400"}

    payroll = normalize(huge)

    assert (payroll.basic_salary, payroll.net_salary, payroll.deductions) == (0, 0, 0)
    assert payroll.days_worked == 0
    assert resolve_basic_salary({"baseSalary": "1e30", "salary": 2500}) == Decimal("2500")


def test_one_oversized_record_does_not_break_the_batch():
    payload = {"data": [{"_id": "p1", "netSalary": "9e999999", "basicSalary": "9e999999"}, {"_id": "p2", "basicSalary": 800}]}

    assert [payroll.id for payroll in extract_payrolls(payload)] == ["p1", "p2"]


def test_oversized_staff_salary_defaults_to_zero():
    staff = extract_staff({"data": [{"_id": "e1", "salary": "1e30"}, {"_id": "e2", "salary": 1000}]})

    assert [member.salary for member in staff] == [Decimal("0.00"), Decimal("1000.00")]


def test_consistent_pair_is_kept():
    payroll = normalize({"_id": "p1", "basicSalary": 1000, "netSalary": 200, "deduction": 800})

    assert payroll.net_salary == Decimal("200")
    assert payroll.deductions == Decimal("800")


def test_ambiguous_pair_is_left_alone():
    payroll = normalize({"_id": "p1", "basicSalary": 1000, "netSalary": 800, "deduction": 200})

    assert payroll.net_salary == Decimal("800")
    assert payroll.deductions == Decimal("200")


def test_net_above_basic_is_swapped_and_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="hrm_payroll"):
        payroll = normalize({"_id": "p9", "basicSalary": 500, "netSalary": 600, "deduction": -100})

    assert payroll.net_salary == Decimal("-100")
    assert payroll.deductions == Decimal("600")
    swaps = [record for record in caplog.records if "transposed" in record.getMessage()]
    assert len(swaps) == 1
    assert swaps[0].payroll_id == "p9"


def test_deduction_above_basic_is_swapped():
    breakdown, swapped = resolve_net_and_deductions(Decimal("1000"), Decimal("150"), Decimal("1150"))

    assert swapped
    assert breakdown.net_salary == Decimal("1150")
    assert breakdown.deductions == Decimal("150")


def test_missing_net_salary_is_derived_from_deductions():
    payroll = normalize({"_id": "p1", "baseSalary": 1000, "deductions": 150})
    assert payroll.net_salary == Decimal("850")
    assert payroll.deductions == Decimal("150")

    clamped = normalize({"_id": "p2", "baseSalary": 100, "deductions": 150})
    assert clamped.net_salary == 0


def test_basic_salary_takes_first_usable_synonym():
    assert resolve_basic_salary({"baseSalary": 1200, "basicSalary": 900, "salary": 700}) == Decimal("1200")
    assert resolve_basic_salary({"baseSalary": "abc", "basicSalary": "900"}) == Decimal("900")
    assert resolve_basic_salary({"basicSalary": float("nan"), "salary": 700}) == Decimal("700")
    assert resolve_basic_salary({"basicSalary": float("inf")}) == 0


def test_field_synonyms():
    payroll = normalize(
        {
            "id": 42,
            "salary": "2500",
            "deductions": "100",
            "totalSalary": 2400,
            "presentDays": 20,
            "totalWorkingDays": 22,
            "paid_leaves": 1,
            "unpaid_days": 1,
            "paymentStatus": "paid",
            "month": 3,
            "year": 2024,
        }
    )

    assert payroll.id == "42"
    assert payroll.basic_salary == Decimal("2500")
    assert payroll.net_salary == Decimal("2400")
    assert payroll.deductions == Decimal("100")
    assert (payroll.days_worked, payroll.total_days, payroll.paid_leaves, payroll.unpaid_days) == (20, 22, 1, 1)
    assert payroll.status == "Paid"
    assert payroll.month == "March"
    assert payroll.year == "2024"


def test_nested_employee_and_store():
    payroll = normalize(
        {
            "_id": "p1",
            "employee": {
                "_id": "e1",
                "fullName": "Full Name",
                "designation": "Cashier",
                "user": {"name": "User Name"},
                "store": {"_id": "s1", "name": "Central"},
            },
        }
    )

    assert payroll.staff_id == "e1"
    assert payroll.staff_name == "User Name"
    assert payroll.designation == "Cashier"
    assert payroll.branch_id == "s1"
    assert payroll.branch_name == "Central"


def test_top_level_fields_win_over_nested_ones():
    payroll = normalize(
        {
            "_id": "p1",
            "staffName": "Listed Name",
            "designation": "Supervisor",
            "branchName": "Harbour",
            "employee": {"_id": "e1", "fullName": "Full Name", "designation": "Cashier"},
        }
    )

    assert payroll.staff_name == "Listed Name"
    assert payroll.designation == "Supervisor"
    assert payroll.branch_name == "Harbour"


def test_flat_identifiers():
    payroll = normalize({"_id": "p2", "employeeId": "e9", "storeId": "s9", "storeName": "North"})

    assert payroll.staff_id == "e9"
    assert payroll.branch_id == "s9"
    assert payroll.branch_name == "North"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [({"month": 7}, "July"), ({"month": "07"}, "July"), ({"month": "March"}, "March"), ({"month": 13}, "")],
)
def test_month_is_a_name(raw, expected):
    assert normalize({"_id": "p1", **raw}).month == expected


@pytest.mark.parametrize(("status", "expected"), [("PAID", "Paid"), ("processing", "Processing"), ("Failed", "Pending")])
def test_status_is_canonical(status, expected):
    assert normalize({"_id": "p1", "status": status}).status == expected


@pytest.mark.parametrize(
    "payload",
    [
        [{"_id": "p1"}],
        {"data": [{"_id": "p1"}]},
        {"payrolls": [{"_id": "p1"}]},
        {"data": {"payrolls": [{"_id": "p1"}]}},
        {"data": {"data": {"payrolls": [{"_id": "p1"}]}}},
        {"results": [{"_id": "p1"}]},
    ],
)
def test_extract_payrolls_unwraps_envelopes(payload):
    assert [payroll.id for payroll in extract_payrolls(payload)] == ["p1"]


def test_extract_payrolls_drops_unidentifiable_items():
    payload = {"data": [{"_id": "p1"}, {"basicSalary": 100}, "noise", None, {"id": "p2"}]}

    assert [payroll.id for payroll in extract_payrolls(payload)] == ["p1", "p2"]
    assert extract_payrolls("not json") == []
    assert extract_payrolls({"data": None}) == []


def test_normalize_staff():
    staff = normalize_staff(
        {
            "_id": "e1",
            "user": {"name": "Asha Verma", "email": "asha@example.com"},
            "designation": "Cashier",
            "salary": "3000.456",
            "storeId": {"_id": "store-01", "name": "Central"},
            "joiningDate": "2022-04-01",
        }
    )

    assert staff.name == "Asha Verma"
    assert staff.email == "asha@example.com"
    assert staff.store_id == "store-01"
    assert staff.store_name == "Central"
    assert staff.salary == Decimal("3000.46")
    assert staff.join_date == "2022-04-01"
    assert staff.status == "Active"


def test_extract_staff_reads_employee_envelopes():
    payload = {"data": {"employees": [{"_id": "e1", "name": "A", "status": "Inactive"}, {"name": "no id"}]}}

    staff = extract_staff(payload)

    assert [member.id for member in staff] == ["e1"]
    assert staff[0].status == "Inactive"

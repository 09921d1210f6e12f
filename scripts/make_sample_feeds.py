#!/usr/bin/env python
from __future__ import annotations

import argparse
import calendar
import json
from datetime import date
from pathlib import Path


STAFF = [
    {"_id": "emp-001", "name": "Asha Verma", "designation": "Cashier", "salary": 3000,
     "storeId": {"_id": "store-01", "name": "Central"}, "status": "Active"},
    {"_id": "emp-002", "name": "Ravi Menon", "designation": "Store Manager", "salary": 5200,
     "storeId": {"_id": "store-01", "name": "Central"}, "status": "Active"},
    {"_id": "emp-003", "name": "Lena Park", "designation": "Stock Clerk", "salary": 2400,
     "storeId": {"_id": "store-02", "name": "Harbour"}, "status": "Active"},
]


def _attendance(month: int, year: int, absent_every: int) -> list[dict]:
    rows: list[dict] = []
    last_day = calendar.monthrange(year, month)[1]
    for staff_index, staff in enumerate(STAFF):
        for day in range(1, last_day + 1):
            status = "Absent" if (day + staff_index) % absent_every == 0 else "Present"
            rows.append({
                "employeeId": staff["_id"],
                "date": date(year, month, day).isoformat(),
                "status": status,
            })
    return rows


def main() -> None:
    parser = argparse.ArgumentParser(description="Write sample HR feeds as JSON files")
    parser.add_argument("--month", type=int, required=True, help="Month number 1-12")
    parser.add_argument("--year", type=int, required=True, help="Four digit year")
    parser.add_argument("--output", default="sample_feeds", help="Output directory")
    parser.add_argument("--absent-every", type=int, default=9, help="Mark every Nth day absent")
    args = parser.parse_args()

    output = Path(args.output)
    output.mkdir(parents=True, exist_ok=True)

    leaves = [
        {"employeeId": "emp-001", "startDate": date(args.year, args.month, 3).isoformat(),
         "endDate": date(args.year, args.month, 4).isoformat(), "status": "Approved", "isPaid": True},
        {"employeeId": "emp-003", "startDate": date(args.year, args.month, 10).isoformat(),
         "endDate": date(args.year, args.month, 10).isoformat(), "status": "Approved", "isHalfDay": True},
    ]
    payrolls = [
        {"_id": "payroll-00001", "employee": {"_id": "emp-002", "user": {"name": "Ravi Menon"}},
         "month": args.month, "year": args.year, "baseSalary": 5200, "netSalary": 4800,
         "deduction": 400, "status": "Processing"},
    ]

    files = {
        "staff.json": {"data": STAFF},
        "attendance.json": {"data": _attendance(args.month, args.year, args.absent_every)},
        "leaves.json": {"data": leaves},
        "payrolls.json": {"data": payrolls},
    }
    for name, payload in files.items():
        (output / name).write_text(json.dumps(payload, indent=2), encoding="utf-8")

    print(f"sample feeds written to: {output}")


if __name__ == "__main__":
    main()

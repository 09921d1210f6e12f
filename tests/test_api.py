import sys
from datetime import date
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[1]))

from hrm_payroll.app import create_app
from hrm_payroll.application import reset_payroll_service
from hrm_payroll.core.settings import Settings
from hrm_payroll.core.validation import DataUnavailable
from hrm_payroll.infrastructure import InMemoryFeedClient


def _feeds() -> InMemoryFeedClient:
    attendance = [
        {"employeeId": "e1", "date": date(2024, 2, day).isoformat(), "status": "Present"} for day in range(1, 26)
    ]
    attendance += [
        {"employeeId": "e2", "date": date(2024, 2, day).isoformat(), "clockIn": "09:00", "clockOut": "17:30"}
        for day in range(1, 21)
    ]
    return InMemoryFeedClient(
        staff=[
            {"_id": "e1", "name": "Asha Verma", "designation": "Cashier", "salary": 3000,
             "storeId": {"_id": "s1", "name": "Central"}},
            {"_id": "e2", "name": "Ravi Menon", "designation": "Store Manager", "salary": 5800,
             "storeId": {"_id": "s1", "name": "Central"}},
        ],
        attendance=attendance,
        leaves=[
            {"employeeId": "e1", "startDate": "2024-02-26", "endDate": "2024-02-27", "status": "Approved"},
        ],
        payrolls=[
            {"_id": "p1", "employeeId": "e1", "staffName": "Asha Verma", "month": "February", "year": "2024",
             "baseSalary": 3000, "netSalary": 2793.10, "deduction": 206.90, "status": "Processing"},
        ],
    )


class _UnavailableFeeds(InMemoryFeedClient):
    def _fail(self, *args, **kwargs):
        raise DataUnavailable("backend offline")

    fetch_attendance = _fail
    fetch_leaves = _fail
    fetch_staff = _fail
    fetch_payrolls = _fail


@pytest.fixture
def feeds():
    client = _feeds()
    reset_payroll_service(client)
    yield client
    reset_payroll_service()


@pytest.fixture
def client(feeds):
    return TestClient(create_app(Settings()))


def test_root_landing_page(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"


def test_period_listing_includes_ghosts(client):
    response = client.get("/api/payrolls", params={"month": "February", "year": "2024"})

    assert response.status_code == 200
    items = response.json()["items"]
    assert [item["id"] for item in items] == ["p1", "temp_e2"]
    ghost = items[1]
    assert ghost["staffId"] == "e2"
    assert ghost["status"] == "Pending"
    assert ghost["basicSalary"] == pytest.approx(5800)
    assert ghost["branchName"] == "Central"


def test_listing_filters(client):
    response = client.get("/api/payrolls", params={"month": "February", "year": "2024", "status": "Pending"})
    assert [item["id"] for item in response.json()["items"]] == ["temp_e2"]

    response = client.get("/api/payrolls", params={"month": "February", "year": "2024", "search": "ravi"})
    assert [item["id"] for item in response.json()["items"]] == ["temp_e2"]

    history = client.get("/api/payrolls")
    assert [item["id"] for item in history.json()["items"]] == ["p1"]


def test_summary(client):
    response = client.get("/api/payrolls/summary", params={"month": "February", "year": "2024"})

    body = response.json()
    assert response.status_code == 200
    assert body["records"] == 2
    assert body["processing_count"] == 1
    assert body["pending_count"] == 1
    assert body["total_payroll"] == pytest.approx(2793.10)


def test_attendance_summary(client):
    response = client.get("/api/staff/e1/attendance-summary", params={"month": "February", "year": 2024})

    assert response.status_code == 200
    assert response.json() == {
        "staffId": "e1",
        "month": 2,
        "year": 2024,
        "totalDays": 29,
        "daysWorked": 25,
        "paidLeaves": 2,
        "unpaidDays": 2,
    }


def test_attendance_summary_rejects_unknown_month(client):
    response = client.get("/api/staff/e1/attendance-summary", params={"month": "Smarch", "year": 2024})

    assert response.status_code == 400


def test_staff_listing(client):
    response = client.get("/api/staff")

    assert [item["id"] for item in response.json()["items"]] == ["e1", "e2"]
    assert response.json()["items"][0]["storeName"] == "Central"


def test_compute_endpoint(client):
    response = client.post(
        "/api/payrolls/compute",
        json={"basicSalary": 3000, "totalDays": 29, "daysWorked": 25, "paidLeaves": 2},
    )

    assert response.status_code == 200
    assert response.json()["netSalary"] == pytest.approx(2793.10)
    assert response.json()["deductions"] == pytest.approx(206.90)


def test_compute_endpoint_rejects_non_numeric_input(client):
    response = client.post("/api/payrolls/compute", json={"basicSalary": "lots", "totalDays": 30})

    assert response.status_code == 400


def test_compute_endpoint_rejects_out_of_range_amounts(client):
    response = client.post(
        "/api/payrolls/compute",
        json={"basicSalary": 1e27, "totalDays": 30, "daysWorked": 30, "paidLeaves": 0},
    )

    assert response.status_code == 400
    assert "out of range" in response.json()["detail"]


def test_listing_survives_oversized_staff_salary(client, feeds):
    feeds.staff[1]["salary"] = "1e30"

    response = client.get("/api/payrolls", params={"month": "February", "year": "2024"})

    assert response.status_code == 200
    ghost = response.json()["items"][1]
    assert ghost["id"] == "temp_e2"
    assert ghost["basicSalary"] == 0


def test_preview_uses_staff_salary(client):
    response = client.post("/api/payrolls/preview", json={"staffId": "e2", "month": "February", "year": "2024"})

    body = response.json()
    assert response.status_code == 200
    assert body["daysWorked"] == 20
    assert body["unpaidDays"] == 9
    assert body["basicSalary"] == pytest.approx(5800)
    assert body["netSalary"] == pytest.approx(4000)
    assert body["deductions"] == pytest.approx(1800)


def test_preview_requires_period(client):
    response = client.post("/api/payrolls/preview", json={"staffId": "e2"})

    assert response.status_code == 400


def test_submit_ghost_creates_payroll(client, feeds):
    ghost = client.get("/api/payrolls", params={"month": "February", "year": "2024"}).json()["items"][1]
    ghost.update({"totalDays": 29, "daysWorked": 20, "paidLeaves": 0, "unpaidDays": 9})

    response = client.post("/api/payrolls/submit", json=ghost)

    assert response.status_code == 200
    assert response.json()["action"] == "create"
    created = feeds.payrolls[-1]
    assert created["staffId"] == "e2"
    assert created["month"] == "02"
    assert created["netSalary"] == pytest.approx(4000)

    listing = client.get("/api/payrolls", params={"month": "February", "year": "2024"}).json()["items"]
    assert [item["id"] for item in listing] == ["p1", created["_id"]]


def test_submit_existing_updates_payroll(client, feeds):
    existing = client.get("/api/payrolls", params={"month": "February", "year": "2024"}).json()["items"][0]
    existing.update({"status": "Paid", "remarks": "bank transfer"})

    response = client.post("/api/payrolls/submit", json=existing)

    assert response.status_code == 200
    assert response.json()["action"] == "update"
    assert len(feeds.payrolls) == 1
    assert feeds.payrolls[0]["status"] == "Paid"
    assert feeds.payrolls[0]["remarks"] == "bank transfer"


def test_submit_without_staff_is_rejected(client):
    response = client.post("/api/payrolls/submit", json={"id": "temp_x", "month": "February", "year": "2024"})

    assert response.status_code == 400


def test_unavailable_feeds_map_to_503(feeds):
    reset_payroll_service(_UnavailableFeeds())
    client = TestClient(create_app(Settings()))

    assert client.get("/api/staff/e1/attendance-summary", params={"month": 2, "year": 2024}).status_code == 503
    assert client.get("/api/payrolls").status_code == 503
    assert client.get("/api/staff").status_code == 503
    assert client.post(
        "/api/payrolls/preview", json={"staffId": "e1", "month": "February", "year": "2024"}
    ).status_code == 503

import pytest

from src.timekeeping.timekeeping.core.exceptions import PersistenceError
from src.timekeeping.timekeeping.main import create_app


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, user_id=7, role="employee"):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


def test_requires_login(client):
    assert client.post("/api/attendance/clock-in").status_code == 401
    assert client.get("/api/attendance/today").status_code == 401
    assert client.get("/api/labor-cost").status_code == 401


def test_punch_day_over_http(client, clock):
    login(client)

    res = client.post("/api/attendance/clock-in", json={"notes": "front desk"})
    assert res.status_code == 200
    body = res.get_json()
    assert body["status"] == "clocked_in"
    assert body["timeIn"] == "2024-03-04T08:00:00"
    assert body["activeBreak"] is None

    res = client.post("/api/attendance/clock-in")
    assert res.status_code == 409
    assert res.get_json()["error"] == "AlreadyClockedIn"

    clock.advance(hours=4)
    res = client.post("/api/attendance/break-start", json={"breakType": "lunch"})
    assert res.status_code == 200
    assert res.get_json()["activeBreak"]["breakType"] == "lunch"

    res = client.post("/api/attendance/clock-out")
    assert res.status_code == 409
    assert res.get_json()["error"] == "BreakInProgress"

    clock.advance(minutes=30)
    assert client.post("/api/attendance/break-end").status_code == 200

    clock.advance(hours=4, minutes=30)
    res = client.post("/api/attendance/clock-out")
    assert res.status_code == 200
    body = res.get_json()
    assert body["status"] == "clocked_out"
    assert body["totalBreakMinutes"] == 30
    assert body["totalWorkMinutes"] == 510

    today = client.get("/api/attendance/today").get_json()
    assert today["attendance"]["id"] == body["id"]
    assert today["activeBreak"] is None
    assert len(today["breaks"]) == 1


def test_break_end_without_break(client):
    login(client)

    res = client.post("/api/attendance/break-end")

    assert res.status_code == 409
    assert res.get_json() == {"error": "NoActiveBreak", "message": "No active break found."}


def test_today_without_attendance(client):
    login(client)

    assert client.get("/api/attendance/today").get_json() == {"attendance": None, "activeBreak": None, "breaks": []}


def test_own_history_with_summary(client, clock):
    login(client)
    client.post("/api/attendance/clock-in")
    clock.advance(hours=9)
    client.post("/api/attendance/clock-out")

    body = client.get("/api/attendance").get_json()

    assert body["startDate"] == "2024-03-01"
    assert body["endDate"] == "2024-03-31"
    assert len(body["records"]) == 1
    assert body["records"][0]["worked"] == "9h 0m"
    assert body["records"][0]["overtimeHours"] == 1.0
    assert body["summary"]["presentCount"] == 1
    assert body["summary"]["totalWorkMinutes"] == 540


def test_history_rejects_bad_dates(client):
    login(client)

    res = client.get("/api/attendance?start=2024-03-10&end=2024-03-01")
    assert res.status_code == 400
    assert "end" in res.get_json()["errors"]

    res = client.get("/api/attendance?date=03/01/2024")
    assert res.status_code == 400
    assert "date" in res.get_json()["errors"]


def test_all_attendance_is_restricted(client):
    login(client, role="employee")
    res = client.get("/api/attendance/all")
    assert res.status_code == 403
    assert res.get_json() == {"message": "Access denied"}

    login(client, user_id=1, role="manager")
    res = client.get("/api/attendance/all?half=1")
    assert res.status_code == 200
    assert res.get_json()["endDate"] == "2024-03-15"

    assert client.get("/api/attendance/all?employee_id=abc").status_code == 400


def test_all_attendance_filters_by_employee(client, clock):
    for employee_id in (7, 8):
        login(client, user_id=employee_id)
        client.post("/api/attendance/clock-in")

    login(client, user_id=1, role="payroll_officer")
    everyone = client.get("/api/attendance/all").get_json()
    one = client.get("/api/attendance/all?employee_id=8").get_json()

    assert {r["employeeId"] for r in everyone["records"]} == {7, 8}
    assert [r["employeeId"] for r in one["records"]] == [8]


def test_pay_period(client):
    login(client)

    body = client.get("/api/pay-period").get_json()

    assert body["half"] == 1
    assert body["label"] == "1st Half (1-15)"
    assert body["start"] == "2024-03-01T00:00:00"
    assert body["end"] == "2024-03-15T23:59:59.999000"
    assert body["previous"]["start"] == "2024-02-16T00:00:00"
    assert body["previous"]["end"] == "2024-02-29T23:59:59.999000"
    assert body["next"]["half"] == 2

    assert client.get("/api/pay-period?half=3").status_code == 400


def test_labor_cost_crud(client):
    login(client, user_id=1, role="admin")

    res = client.post(
        "/api/labor-cost",
        json={"month": 3, "year": 2024, "totalSales": "1000000", "totalLaborCost": "250000"},
    )
    assert res.status_code == 201
    entry = res.get_json()
    assert entry["laborCostPercentage"] == 2500
    assert entry["status"] == "Excellent"
    assert entry["display"]["laborCostPercentage"] == "25.0%"

    res = client.patch(
        f"/api/labor-cost/{entry['id']}",
        json={"month": 3, "year": 2024, "totalSales": "1000000", "totalLaborCost": "600000"},
    )
    assert res.status_code == 200
    assert res.get_json()["performanceRating"] == "critical"

    assert [e["id"] for e in client.get("/api/labor-cost?year=2024").get_json()] == [entry["id"]]

    assert client.delete(f"/api/labor-cost/{entry['id']}").status_code == 200
    assert client.delete(f"/api/labor-cost/{entry['id']}").status_code == 404


def test_labor_cost_validation_errors(client):
    login(client, user_id=1, role="manager")

    res = client.post("/api/labor-cost", json={"month": 0, "year": 2024, "totalSales": "-5"})

    assert res.status_code == 400
    assert set(res.get_json()["errors"]) == {"month", "totalSales", "totalLaborCost"}


def test_labor_cost_forbidden_for_employees(client):
    login(client)

    assert client.get("/api/labor-cost").status_code == 403


def test_storage_failure_is_retryable(client, attendance_repo, monkeypatch):
    login(client)

    def unavailable(employee_id):
        raise PersistenceError("connection lost")

    monkeypatch.setattr(attendance_repo, "get_open_for_employee", unavailable)
    res = client.post("/api/attendance/clock-in")

    assert res.status_code == 503
    assert res.get_json()["retryable"] is True


def test_labor_cost_huge_amount_is_a_field_error(client):
    login(client, user_id=1, role="admin")

    res = client.post(
        "/api/labor-cost",
        json={"month": 3, "year": 2024, "totalSales": "1e30", "totalLaborCost": "1"},
    )

    assert res.status_code == 400
    assert set(res.get_json()["errors"]) == {"totalSales"}


def test_pay_period_flags_current_period(client):
    login(client)

    assert client.get("/api/pay-period").get_json()["isCurrent"] is True
    assert client.get("/api/pay-period?date=2024-02-10").get_json()["isCurrent"] is False


def test_labor_cost_by_month(client):
    login(client, user_id=1, role="payroll_officer")
    client.post("/api/labor-cost", json={"month": 4, "year": 2024, "totalSales": "100", "totalLaborCost": "40"})

    res = client.get("/api/labor-cost/2024/4")
    assert res.status_code == 200
    assert res.get_json()["laborCostPercentage"] == 4000

    assert client.get("/api/labor-cost/2024/5").status_code == 404

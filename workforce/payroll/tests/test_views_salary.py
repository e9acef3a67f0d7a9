import pytest
from datetime import date
from decimal import Decimal
from rest_framework.test import APIClient

from payroll.models import AttendanceRecord, SalaryCycle


@pytest.fixture
def client():
    return APIClient()

def _attend(client, worker, day, ot_units="0"):
    resp = client.post("/api/payroll/attendance/", {
        "worker_id": worker.id, "date": day, "status": "PRESENT", "ot_units": ot_units,
    }, format="json")
    assert resp.status_code == 201, resp.content
    return resp.json()


@pytest.mark.django_db
def test_calculate_create_issue(client, worker):
    _attend(client, worker, "2024-01-01", ot_units="2")

    resp = client.get(f"/api/payroll/salaries/calculate/{worker.id}", {"pay_date": "2024-01-01"})
    assert resp.status_code == 200, resp.content
    assert Decimal(str(resp.json()["gross_pay"])) == Decimal("600.00")

    resp = client.post(f"/api/payroll/salaries/{worker.id}/create?pay_date=2024-01-01")
    assert resp.status_code == 201, resp.content
    salary_id = resp.json()["id"]
    assert resp.json()["status"] == "PENDING"

    resp = client.post(f"/api/payroll/salaries/{salary_id}/issue", {"amount": "100"}, format="json")
    assert resp.status_code == 200, resp.content
    assert resp.json()["status"] == "PARTIAL"

    resp = client.post(f"/api/payroll/salaries/{salary_id}/issue", {"amount": "900"}, format="json")
    assert resp.status_code == 400
    assert resp.json()["code"] == "amount_exceeded"

    resp = client.get(f"/api/payroll/salaries/{salary_id}")
    assert resp.status_code == 200
    assert len(resp.json()["payments"]) == 1

@pytest.mark.django_db
def test_locked_attendance_returns_409(client, worker, paid_cycle):
    resp = client.post("/api/payroll/attendance/", {
        "worker_id": worker.id, "date": "2024-01-05", "status": "PRESENT",
    }, format="json")
    assert resp.status_code == 409
    assert resp.json()["code"] == "record_locked"

@pytest.mark.django_db
def test_lock_and_paid_periods(client, worker, paid_cycle):
    resp = client.get("/api/payroll/salaries/lock", {"worker_id": worker.id, "date": "2024-01-10"})
    assert resp.status_code == 200
    assert resp.json()["locked"] is True

    resp = client.get("/api/payroll/salaries/lock",
                      {"worker_id": worker.id, "date": "2024-01-10", "scope": "advance"})
    assert resp.json()["locked"] is False

    resp = client.get("/api/payroll/salaries/paid-periods", {"worker_id": worker.id})
    assert resp.status_code == 200
    periods = resp.json()["periods"]
    assert [p["id"] for p in periods] == [paid_cycle.id]

@pytest.mark.django_db
def test_issue_paid_cycle_is_conflict(client, paid_cycle):
    resp = client.post(f"/api/payroll/salaries/{paid_cycle.id}/issue", {"amount": "1"}, format="json")
    assert resp.status_code == 409
    assert resp.json()["code"] == "already_settled"

@pytest.mark.django_db
def test_unknown_worker_is_404(client):
    resp = client.get("/api/payroll/salaries/calculate/9999")
    assert resp.status_code == 404
    assert resp.json()["code"] == "not_found"

@pytest.mark.django_db
def test_pay_worker_endpoint(client, worker):
    SalaryCycle.objects.create(worker=worker, cycle_start=date(2024, 1, 1), cycle_end=date(2024, 1, 10),
                               net_pay=Decimal("300.00"))
    resp = client.post(f"/api/payroll/salaries/worker/{worker.id}/pay", {"amount": "300"}, format="json")
    assert resp.status_code == 200, resp.content
    results = resp.json()["results"]
    assert len(results) == 1

    resp = client.get(f"/api/payroll/salaries/worker/{worker.id}/carry-forward")
    assert Decimal(str(resp.json()["carry_forward"])) == Decimal("0")

    resp = client.get(f"/api/payroll/salaries/worker/{worker.id}")
    assert resp.json()["count"] == 1

@pytest.mark.django_db
def test_worker_and_expense_type_endpoints(client):
    resp = client.post("/api/payroll/workers/", {
        "name": "Anil", "wage": "450.00", "joined_at": "2024-01-01",
    }, format="json")
    assert resp.status_code == 201, resp.content
    worker_id = resp.json()["id"]

    resp = client.post(f"/api/payroll/workers/{worker_id}/deactivate/")
    assert resp.status_code == 200
    assert resp.json()["is_active"] is False

    resp = client.post("/api/payroll/attendance/", {
        "worker_id": worker_id, "date": "2024-01-02", "status": AttendanceRecord.Status.PRESENT,
    }, format="json")
    assert resp.status_code == 400
    assert resp.json()["code"] == "inactive_worker"

    resp = client.post("/api/payroll/expenses/types/", {"name": "Travel"}, format="json")
    assert resp.status_code == 201
    resp = client.get("/api/payroll/expenses/types/")
    assert "Travel" in [t["name"] for t in resp.json()]

@pytest.mark.django_db
def test_attendance_list_filter(client, worker):
    _attend(client, worker, "2024-01-02")
    _attend(client, worker, "2024-02-02")
    resp = client.get("/api/payroll/attendance/", {"worker_id": worker.id, "month": "2024-01"})
    assert resp.status_code == 200
    assert resp.json()["count"] == 1

    resp = client.get("/api/payroll/attendance/", {"month": "2024-1"})
    assert resp.status_code == 400

@pytest.mark.django_db
def test_shortfall_advance_delete_is_409(client, worker):
    _attend(client, worker, "2024-01-01")
    resp = client.post("/api/payroll/advances/", {
        "worker_id": worker.id, "date": "2024-01-01", "amount": "700",
    }, format="json")
    assert resp.status_code == 201, resp.content
    resp = client.post(f"/api/payroll/salaries/{worker.id}/create?pay_date=2024-01-01")
    assert resp.status_code == 201, resp.content

    resp = client.get("/api/payroll/advances/", {"worker_id": worker.id})
    auto = [a for a in resp.json()["results"] if a["is_shortfall"]]
    assert len(auto) == 1
    resp = client.delete(f"/api/payroll/advances/{auto[0]['id']}/")
    assert resp.status_code == 409
    assert resp.json()["code"] == "record_locked"

@pytest.mark.django_db
def test_advance_report_endpoints(client, worker, other_worker):
    for day, amount in (("2024-01-02", "100"), ("2024-01-05", "50")):
        resp = client.post("/api/payroll/advances/", {
            "worker_id": worker.id, "date": day, "amount": amount,
        }, format="json")
        assert resp.status_code == 201, resp.content

    resp = client.get(f"/api/payroll/advances/worker/{worker.id}/total/", {"start_date": "2024-01-03"})
    assert resp.status_code == 200, resp.content
    assert Decimal(str(resp.json()["total"])) == Decimal("50.00")
    assert resp.json()["end_date"] is None

    resp = client.get("/api/payroll/advances/worker/999/total/")
    assert resp.status_code == 404

    resp = client.get("/api/payroll/advances/workers/")
    assert resp.status_code == 200
    rows = {r["id"]: r for r in resp.json()}
    assert rows[worker.id]["latest_advance_date"] == "2024-01-05"
    assert rows[other_worker.id]["latest_advance_amount"] is None

@pytest.mark.django_db
def test_worker_wage_history_and_scheduled_inactivation(client):
    resp = client.post("/api/payroll/workers/", {
        "name": "Anil", "wage": "450.00", "joined_at": "2024-01-01",
    }, format="json")
    worker_id = resp.json()["id"]

    resp = client.patch(f"/api/payroll/workers/{worker_id}/", {
        "wage": "480.00", "wage_effective_date": "2024-01-15",
    }, format="json")
    assert resp.status_code == 200, resp.content

    resp = client.get(f"/api/payroll/workers/{worker_id}/wage-history/")
    assert [r["effective_from"] for r in resp.json()] == ["2024-01-15", "2024-01-01"]
    resp = client.get(f"/api/payroll/workers/{worker_id}/rate/", {"date": "2024-01-10"})
    assert Decimal(str(resp.json()["wage"])) == Decimal("450.00")

    resp = client.post(f"/api/payroll/workers/{worker_id}/deactivate/", {"effective_from": "2024-01-20"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["is_active"] is True
    assert resp.json()["inactive_from"] == "2024-01-20"

    resp = client.post("/api/payroll/attendance/", {
        "worker_id": worker_id, "date": "2024-01-20", "status": AttendanceRecord.Status.PRESENT,
    }, format="json")
    assert resp.status_code == 400
    assert resp.json()["code"] == "inactive_worker"

"""HTTP surface: routing, status codes and error bodies over the service layer."""
from datetime import date, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from gymtrack.core.database import get_db
from gymtrack.main import app
from gymtrack.models import Attendance


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def member_with_plan(client):
    plan = client.post("/api/v1/plans/", json={"plan_name": "Basic", "price": "1000", "duration_months": 1})
    assert plan.status_code == 201
    member = client.post("/api/v1/members/", json={"name": "Asha", "selected_plan_id": plan.json()["id"]})
    assert member.status_code == 201
    return member.json()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_member_registration_derives_status(member_with_plan):
    assert member_with_plan["membership_status"] == "Active"
    assert member_with_plan["current_plan_name"] == "Basic"
    assert member_with_plan["current_plan_is_active"] is True
    assert member_with_plan["current_plan_start_date"] == date.today().isoformat()


def test_partial_payment_then_due_list(client, member_with_plan):
    payment = client.post("/api/v1/payments/", json={
        "member_id": member_with_plan["id"],
        "amount": "600",
        "payment_date": date.today().isoformat(),
        "payment_method": "Cash",
        "membership_plan_id": member_with_plan["current_plan_id"],
    })
    assert payment.status_code == 201
    body = payment.json()
    assert float(body["due_amount"]) == 400
    assert body["membership_plan_name"] == "Basic"

    dues = client.get("/api/v1/payments/due")
    assert [p["id"] for p in dues.json()] == [body["id"]]


def test_check_in_then_early_check_out_is_rejected(client, member_with_plan):
    member_id = member_with_plan["id"]

    first = client.post(f"/api/v1/attendance/member/{member_id}")
    assert first.status_code == 200
    assert first.json()["check_out_time"] is None

    second = client.post(f"/api/v1/attendance/member/{member_id}")
    assert second.status_code == 400
    assert "Check-out not allowed" in second.json()["detail"]

    today = client.get(f"/api/v1/attendance/member/{member_id}/today")
    assert today.json()["id"] == first.json()["id"]


def test_not_found_shape(client):
    response = client.get("/api/v1/members/123456")
    assert response.status_code == 404
    assert response.json() == {"detail": "Member not found with id: 123456"}


def test_conflict_shape(client, member_with_plan):
    response = client.post("/api/v1/plans/", json={"plan_name": "Basic", "price": "500", "duration_months": 1})
    assert response.status_code == 409
    assert "already exists" in response.json()["detail"]


def test_inverted_analytics_range_is_bad_request(client):
    response = client.get("/api/v1/payments/analytics", params={"start_date": "2025-02-01", "end_date": "2025-01-01"})
    assert response.status_code == 400


def test_summary_generate_reports_nothing_to_do(client, member_with_plan):
    assert client.get("/api/v1/attendance/summary/status").json() == {"has_pending_records": False}
    response = client.post("/api/v1/attendance/summary/generate")
    assert response.status_code == 200
    body = response.json()
    assert body["generated"] is False
    assert body["written"] is None


def test_check_out_all_updates_summaries(client, db_session, member_with_plan):
    now = datetime.now()
    db_session.add(Attendance(member_id=member_with_plan["id"], attendance_date=now.date(),
                              check_in_time=now - timedelta(minutes=30)))
    db_session.commit()

    response = client.post("/api/v1/attendance/check-out-all")

    assert response.status_code == 200
    body = response.json()
    assert body["checked_out_count"] == 1
    assert body["summaries"] == {"daily": 1, "monthly": 1, "yearly": 1}
    assert client.get("/api/v1/attendance/summary/status").json() == {"has_pending_records": False}

    again = client.post("/api/v1/attendance/check-out-all").json()
    assert again["checked_out_count"] == 0
    assert again["summaries"] is None


def test_filter_members_by_status(client, member_with_plan):
    active = client.get("/api/v1/dashboard/members/filter-status", params={"status": "Active"})
    assert [m["id"] for m in active.json()] == [member_with_plan["id"]]
    assert client.get("/api/v1/dashboard/members/filter-status", params={"status": "Expired"}).json() == []
    assert client.get("/api/v1/dashboard/members/filter-status", params={"status": "Lapsed"}).status_code == 422


def test_dashboard_counts_active_members(client, member_with_plan):
    assert client.get("/api/v1/dashboard/active-members").json() == {"total_active_members": 1}
    assert client.get("/api/v1/dashboard/plan-distribution").json() == {"Basic": 1}

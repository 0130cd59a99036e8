from datetime import timedelta

import pytest

import routes.forms as forms_routes
from services.form_registry import FORMS
from utils.timeutils import utc_now

from conftest import purchase_header, purchase_items

APPROVAL = {"approved_by": "Ana Cruz", "approved_signature": "signatures/ana.png"}


@pytest.fixture
def year():
    return utc_now().year


def _submit(client, **overrides):
    payload = purchase_header(**overrides)
    payload["items"] = purchase_items()
    return client.post("/api/purchase_request", json=payload)


def test_purchase_request_round_trip(client, year):
    code = f"PR-{year}-000001"

    response = client.get("/api/purchase_request/next-code")
    assert response.status_code == 200
    assert response.json() == {"nextCode": code}

    response = _submit(client)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["purchase_request_code"] == body["form_code"] == code

    response = client.get("/api/purchase_request")
    assert response.status_code == 200
    [row] = response.json()
    assert row["purchase_request_code"] == code
    assert row["status"] == "Pending"
    assert [item["purchase_item"] for item in row["items"]] == ["Bond paper A4", "Stapler"]

    response = client.put(
        "/api/update_purchase_request",
        json=dict(APPROVAL, purchase_request_code=code, status="Approved"),
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["status"] == "Approved"
    assert updated["approved_by"] == "Ana Cruz"
    assert updated["declined_reason"] is None

    assert client.get("/api/purchase_request/next-code").json() == {"nextCode": f"PR-{year}-000002"}


def test_next_code_for_every_form(client, year):
    for form in FORMS.values():
        response = client.get(f"/api/{form.key}/next-code")
        assert response.status_code == 200
        assert response.json()["nextCode"] == form.format_code(year, 1)


def test_consecutive_submissions_get_consecutive_codes(client, year):
    codes = [_submit(client).json()["form_code"] for _ in range(3)]

    assert codes == [f"PR-{year}-{n:06d}" for n in (1, 2, 3)]


def test_detail_and_items(client):
    code = _submit(client).json()["form_code"]
    _submit(client)

    detail = client.get(f"/api/purchase_request/{code}")
    assert detail.status_code == 200
    request_id = detail.json()["id"]

    items = client.get("/api/purchase_request_items", params={"request_id": request_id})
    assert items.status_code == 200
    assert {item["request_id"] for item in items.json()} == {request_id}
    assert len(items.json()) == 2

    assert len(client.get("/api/purchase_request_items").json()) == 4


def test_list_filters(client):
    _submit(client, branch="Cebu")
    _submit(client, branch="Makati")

    rows = client.get("/api/purchase_request", params={"branch": "Cebu"}).json()

    assert [row["branch"] for row in rows] == ["Cebu"]


def test_missing_items_is_a_validation_error(client):
    response = client.post("/api/purchase_request", json=purchase_header())

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["errorKind"] == "validation"


def test_non_object_body_is_a_validation_error(client):
    response = client.post("/api/purchase_request", json=["not", "an", "object"])

    assert response.status_code == 400
    assert response.json()["errorKind"] == "validation"


def test_unknown_code_is_not_found(client):
    response = client.put(
        "/api/update_purchase_request",
        json=dict(APPROVAL, purchase_request_code="PR-2025-999999", status="Approved"),
    )
    assert response.status_code == 404
    assert response.json()["errorKind"] == "not_found"

    assert client.get("/api/purchase_request/PR-2025-999999").status_code == 404


def test_update_requires_code_and_status(client):
    code = _submit(client).json()["form_code"]

    missing_code = client.put("/api/update_purchase_request", json={"status": "Approved"})
    missing_status = client.put("/api/update_purchase_request", json={"purchase_request_code": code})

    assert missing_code.status_code == 400
    assert missing_status.status_code == 400


def test_invalid_transition_is_a_conflict(client):
    code = _submit(client).json()["form_code"]
    client.put(
        "/api/update_purchase_request",
        json={"purchase_request_code": code, "status": "Declined", "declined_reason": "Duplicate"},
    )

    response = client.put(
        "/api/update_purchase_request",
        json=dict(APPROVAL, purchase_request_code=code, status="Approved"),
    )

    assert response.status_code == 409
    assert response.json()["errorKind"] == "invalid_transition"


def test_decline_without_reason(client):
    code = _submit(client).json()["form_code"]

    response = client.put(
        "/api/update_purchase_request", json={"purchase_request_code": code, "status": "Declined"}
    )

    assert response.status_code == 400
    assert client.get(f"/api/purchase_request/{code}").json()["status"] == "Pending"


def test_insert_conflict_is_reported(client, monkeypatch):
    code = _submit(client).json()["form_code"]
    monkeypatch.setattr(forms_routes.store.sequencer, "issue", lambda db, form: code)

    response = _submit(client)

    assert response.status_code == 409
    assert response.json()["errorKind"] == "conflict"
    assert len(client.get("/api/purchase_request").json()) == 1


def test_transmittal_uses_form_code_field(client, year):
    response = client.post(
        "/api/transmittals",
        json={"request_by": "Admin", "recipient": "HR", "items": [{"description": "Payroll folder"}]},
    )
    assert response.status_code == 201
    code = response.json()["form_code"]
    assert code == f"TR-{year}-001"

    response = client.put(
        "/api/update_transmittals",
        json={"form_code": code, "status": "Received", "received_by": "HR", "received_signature": "hr.png"},
    )
    assert response.status_code == 200
    assert response.json()["status"] == "Received"


def test_form_without_items_has_no_items_route(client):
    assert client.get("/api/leave_application_items").status_code == 404


def test_dashboard_endpoints(client):
    _submit(client)

    workload = client.get("/api/dashboard/workload").json()
    assert workload["totals"]["pending"] == 1

    outstanding = client.get("/api/dashboard/outstanding", params={"limit": 6}).json()
    assert outstanding["total"] == 1
    assert outstanding["items"][0]["form_type"] == "purchase_request"

    assert client.get("/api/dashboard/outstanding", params={"limit": 500}).status_code == 400

    engagement = client.get("/api/dashboard/engagement").json()
    assert engagement["submissions_7d"] == 1
    assert engagement["window_days"] == 7


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "running"

    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["database"] == "connected"


def test_reapplying_pending_with_echoed_fields(client):
    code = _submit(client).json()["form_code"]

    response = client.put(
        "/api/update_purchase_request",
        json={"purchase_request_code": code, "status": "Pending", "request_by": "Maria Santos", "branch": "Makati"},
    )

    assert response.status_code == 200
    assert response.json()["status"] == "Pending"


def test_reports_audit(client):
    _submit(client)
    client.post(
        "/api/leave_application",
        json={"request_by": "Jose Reyes", "leave_type": "Vacation Leave", "date_from": "2025-04-01", "date_to": "2025-04-02"},
    )
    today = utc_now().date()
    tomorrow = today + timedelta(days=1)

    body = client.get("/api/reports_audit").json()
    assert body["total"] == 2
    [purchase] = body["tables"]["purchase_request"]
    assert purchase["purchase_request_code"] == purchase["form_code"]
    assert purchase["form_type"] == "purchase_request"
    assert len(body["tables"]["leave_application"]) == 1
    assert body["tables"]["payment_request"] == []

    in_range = client.get("/api/reports_audit", params={"startDate": today.isoformat(), "endDate": tomorrow.isoformat()})
    assert in_range.json()["total"] == 2

    assert client.get("/api/reports_audit", params={"startDate": tomorrow.isoformat()}).json()["total"] == 0
    assert client.get("/api/reports_audit", params={"endDate": today.isoformat()}).json()["total"] == 0

    assert client.get("/api/reports_audit", params={"startDate": "yesterday"}).status_code == 400

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import update

from models import LeaveApplication, PurchaseRequest, User
from services.dashboard import (
    OUTSTANDING_ALERT_SECONDS, DashboardAggregator, status_bucket
)
from services.form_registry import get_form

from conftest import purchase_header, purchase_items

NOW = datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc)
APPROVAL = {"approved_by": "Ana Cruz", "approved_signature": "signatures/ana.png"}


@pytest.fixture
def aggregator():
    return DashboardAggregator(clock=lambda: NOW)


def _submit_purchase(db, store, **header):
    return store.create_request(db, get_form("purchase_request"), purchase_header(**header), purchase_items())


def _submit_leave(db, store, **header):
    values = {"request_by": "Jose Reyes", "leave_type": "Vacation", "date_from": "2025-04-01", "date_to": "2025-04-02"}
    values.update(header)
    return store.create_request(db, get_form("leave_application"), values)


def _backdate(db, model, record_id, age):
    stamp = NOW - age
    db.execute(update(model).where(model.id == record_id).values(created_at=stamp, updated_at=stamp))
    db.commit()


@pytest.mark.parametrize("status, bucket", [
    ("Pending", "pending"),
    ("For Approval", "pending"),
    ("Endorsed", "approved"),
    ("Dispatched", "approved"),
    ("Accomplished", "approved"),
    ("Rejected", "declined"),
    ("Something Else", None),
])
def test_status_bucket(status, bucket):
    assert status_bucket(status) == bucket


def test_empty_database(db, aggregator):
    summary = aggregator.workload_summary(db)
    assert summary["totals"] == {"total": 0, "pending": 0, "approved": 0, "declined": 0}
    assert len(summary["forms"]) == 13

    queue = aggregator.outstanding_queue(db)
    assert queue == {
        "total": 0,
        "alerts": 0,
        "alert_threshold_seconds": OUTSTANDING_ALERT_SECONDS,
        "items": [],
    }


def test_workload_buckets(db, store, machine, aggregator):
    purchase = get_form("purchase_request")
    leave = get_form("leave_application")
    approved = _submit_purchase(db, store)
    _submit_purchase(db, store)
    declined = _submit_leave(db, store)
    machine.apply_transition(db, purchase, approved.form_code, "Approved", APPROVAL)
    machine.apply_transition(db, leave, declined.form_code, "Declined", {"declined_reason": "Peak season"})

    summary = aggregator.workload_summary(db)
    by_form = {entry["form_type"]: entry for entry in summary["forms"]}

    assert by_form["purchase_request"]["total"] == 2
    assert by_form["purchase_request"]["pending"] == 1
    assert by_form["purchase_request"]["approved"] == 1
    assert by_form["purchase_request"]["statuses"] == {"Pending": 1, "Approved": 1}
    assert by_form["leave_application"]["declined"] == 1
    assert by_form["payment_request"]["total"] == 0
    assert summary["totals"] == {"total": 3, "pending": 1, "approved": 1, "declined": 1}


def test_outstanding_queue_counts_alerts_over_all_rows(db, store, aggregator):
    stale = _submit_purchase(db, store, request_by="Stale")
    fresh = _submit_leave(db, store, request_by="Fresh")
    _backdate(db, PurchaseRequest, stale.id, timedelta(days=3))
    _backdate(db, LeaveApplication, fresh.id, timedelta(hours=1))

    queue = aggregator.outstanding_queue(db)

    assert queue["total"] == 2
    assert queue["alerts"] == 1
    assert [item["form_code"] for item in queue["items"]] == [fresh.form_code, stale.form_code]
    assert queue["items"][0]["age_seconds"] == 3600
    assert queue["items"][0]["form_type"] == "leave_application"
    assert queue["items"][1]["age_seconds"] == 3 * 24 * 3600

    # The stale request falls off the page but still raises the alert
    page = aggregator.outstanding_queue(db, limit=1)
    assert [item["form_code"] for item in page["items"]] == [fresh.form_code]
    assert page["alerts"] == 1


def test_exactly_48_hours_is_not_an_alert(db, store, aggregator):
    record = _submit_purchase(db, store)
    _backdate(db, PurchaseRequest, record.id, timedelta(seconds=OUTSTANDING_ALERT_SECONDS))

    assert aggregator.outstanding_queue(db)["alerts"] == 0


def test_outstanding_queue_skips_decided_requests(db, store, machine, aggregator):
    record = _submit_purchase(db, store)
    _submit_purchase(db, store)
    machine.apply_transition(db, get_form("purchase_request"), record.form_code, "Approved", APPROVAL)

    queue = aggregator.outstanding_queue(db)

    assert queue["total"] == 1
    assert record.form_code not in [item["form_code"] for item in queue["items"]]


def test_engagement_summary(db, store, aggregator):
    db.add_all([
        User(employee_id="EMP-007", name="Maria Santos", email="maria@example.com", password="x"),
        User(employee_id="EMP-008", name="Jose Reyes", email="jose@example.com", password="x"),
        User(employee_id="EMP-009", name="Idle User", email="idle@example.com", password="x"),
    ])
    db.commit()

    _submit_purchase(db, store, user_id=7)
    _submit_purchase(db, store, user_id=7)
    _submit_leave(db, store, user_id=8)
    old = _submit_purchase(db, store, user_id=9)
    _backdate(db, PurchaseRequest, old.id, timedelta(days=10))

    engagement = aggregator.engagement_summary(db)

    assert engagement == {
        "total_users": 3,
        "active_users_7d": 2,
        "submissions_7d": 3,
        "window_days": 7,
    }


def test_outstanding_queue_orders_by_latest_activity(db, store, aggregator):
    old_but_touched = _submit_purchase(db, store, request_by="Touched")
    untouched = _submit_leave(db, store, request_by="Untouched")
    _backdate(db, PurchaseRequest, old_but_touched.id, timedelta(days=5))
    _backdate(db, LeaveApplication, untouched.id, timedelta(days=4))
    db.execute(
        update(PurchaseRequest)
        .where(PurchaseRequest.id == old_but_touched.id)
        .values(updated_at=NOW - timedelta(minutes=30))
    )
    db.commit()

    queue = aggregator.outstanding_queue(db, limit=6)

    assert [item["request_by"] for item in queue["items"]] == ["Touched", "Untouched"]
    assert queue["items"][0]["age_seconds"] == 1800
    assert queue["alerts"] == 1


def test_outstanding_queue_limit_applies_to_items_only(db, store, aggregator):
    records = [_submit_purchase(db, store, request_by=f"Requester {n}") for n in range(8)]
    for hours, record in enumerate(records, start=1):
        _backdate(db, PurchaseRequest, record.id, timedelta(hours=hours * 12))

    queue = aggregator.outstanding_queue(db)

    assert queue["total"] == 8
    # 60h, 72h, 84h and 96h are past the 48h threshold
    assert queue["alerts"] == 4
    assert [item["request_by"] for item in queue["items"]] == [f"Requester {n}" for n in range(6)]
    assert aggregator.outstanding_queue(db, limit=0)["items"] == []


def test_audit_report_date_range(db, store, aggregator):
    recent = _submit_purchase(db, store, request_by="Recent")
    archived = _submit_leave(db, store, request_by="Archived")
    _backdate(db, LeaveApplication, archived.id, timedelta(days=10))

    everything = aggregator.audit_report(db)
    assert everything["total"] == 2
    assert len(everything["tables"]) == 13

    since = (NOW - timedelta(days=3)).date()
    window = aggregator.audit_report(db, start_date=since)
    assert [row["request_by"] for row in window["tables"]["purchase_request"]] == ["Recent"]
    assert window["tables"]["leave_application"] == []

    before = aggregator.audit_report(db, end_date=since)
    assert [row["leave_request_code"] for row in before["tables"]["leave_application"]] == [archived.form_code]
    assert before["tables"]["purchase_request"] == []
    assert recent.form_code not in [row["form_code"] for rows in before["tables"].values() for row in rows]

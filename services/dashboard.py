"""
Read-only rollups across every registered form table.

Nothing here writes or caches; each call recomputes from the database.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from sqlalchemy import String, case, func, literal, select, union_all
from sqlalchemy.orm import Session

from models import User
from services.form_registry import FORMS, FormDescriptor
from utils.timeutils import as_utc, utc_now

# Outstanding items older than 48 hours raise an alert
OUTSTANDING_ALERT_SECONDS = 172800
ENGAGEMENT_WINDOW = timedelta(days=7)

PENDING_STATUSES = ("Pending", "For Review", "For Approval")
APPROVED_STATUSES = ("Approved", "Endorsed", "Dispatched", "Received", "Completed", "Accomplished")
DECLINED_STATUSES = ("Declined", "Rejected")


def status_bucket(status: Optional[str]) -> Optional[str]:
    if status in PENDING_STATUSES:
        return "pending"
    if status in APPROVED_STATUSES:
        return "approved"
    if status in DECLINED_STATUSES:
        return "declined"
    return None


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


class DashboardAggregator:
    def __init__(
        self,
        forms: Optional[Dict[str, FormDescriptor]] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.forms = forms if forms is not None else FORMS
        self.clock = clock

    def workload_summary(self, db: Session) -> Dict[str, Any]:
        rows = []
        totals = {"total": 0, "pending": 0, "approved": 0, "declined": 0}
        for form in self.forms.values():
            model = form.model
            counts = db.execute(
                select(model.status, func.count(model.id)).group_by(model.status)
            ).all()

            entry = {
                "form_type": form.key,
                "title": form.title,
                "total": 0,
                "pending": 0,
                "approved": 0,
                "declined": 0,
                "statuses": {},
            }
            for status, count in counts:
                entry["statuses"][status] = count
                entry["total"] += count
                bucket = status_bucket(status)
                if bucket:
                    entry[bucket] += count
            for key in totals:
                totals[key] += entry[key]
            rows.append(entry)

        return {"forms": rows, "totals": totals}

    def _activity_union(self, statuses):
        selects = []
        for form in self.forms.values():
            model = form.model
            selects.append(
                select(
                    literal(form.key, type_=String).label("form_type"),
                    model.id.label("id"),
                    model.form_code.label("form_code"),
                    model.status.label("status"),
                    model.request_by.label("request_by"),
                    model.branch.label("branch"),
                    func.coalesce(model.updated_at, model.created_at).label("activity_ts"),
                ).where(model.status.in_(statuses))
            )
        return union_all(*selects)

    def outstanding_queue(self, db: Session, limit: int = 6) -> Dict[str, Any]:
        """
        Pending requests across all forms, most recently active first.

        ``alerts`` counts every outstanding request older than 48 hours, not
        only the ones on the returned page.
        """
        now = self.clock()
        cutoff = now - timedelta(seconds=OUTSTANDING_ALERT_SECONDS)
        queue = self._activity_union(PENDING_STATUSES).subquery("outstanding")

        total, alerts = db.execute(
            select(
                func.count(),
                func.coalesce(func.sum(case((queue.c.activity_ts < cutoff, 1), else_=0)), 0),
            ).select_from(queue)
        ).one()

        page = db.execute(
            select(queue)
            .order_by(queue.c.activity_ts.desc(), queue.c.form_type.asc(), queue.c.id.desc())
            .limit(max(limit, 0))
        ).mappings()

        items = []
        for row in page:
            activity_ts = as_utc(row["activity_ts"])
            items.append({
                "form_type": row["form_type"],
                "id": row["id"],
                "form_code": row["form_code"],
                "status": row["status"],
                "request_by": row["request_by"],
                "branch": row["branch"],
                "activity_ts": activity_ts.isoformat() if activity_ts else None,
                "age_seconds": max(0, int((now - activity_ts).total_seconds())) if activity_ts else 0,
            })

        return {
            "total": total,
            "alerts": int(alerts),
            "alert_threshold_seconds": OUTSTANDING_ALERT_SECONDS,
            "items": items,
        }

    def audit_report(
        self,
        db: Session,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Dict[str, Any]:
        """
        Every request header grouped by form, newest first.

        ``start_date`` is inclusive and ``end_date`` exclusive, both compared
        against ``created_at`` at UTC midnight.
        """
        tables = {}
        for form in self.forms.values():
            model = form.model
            query = select(model)
            if start_date is not None:
                query = query.where(model.created_at >= _day_start(start_date))
            if end_date is not None:
                query = query.where(model.created_at < _day_start(end_date))
            records = db.execute(query.order_by(model.created_at.desc(), model.id.desc())).scalars().all()

            rows = []
            for record in records:
                row = record.to_dict()
                row["form_type"] = form.key
                row[form.code_field] = record.form_code
                rows.append(row)
            tables[form.key] = rows

        return {"tables": tables, "total": sum(len(rows) for rows in tables.values())}

    def engagement_summary(self, db: Session) -> Dict[str, Any]:
        now = self.clock()
        since = now - ENGAGEMENT_WINDOW

        selects = [
            select(form.model.user_id.label("user_id"), form.model.request_by.label("request_by"))
            .where(form.model.created_at >= since)
            for form in self.forms.values()
        ]
        submitters = set()
        submissions = 0
        for user_id, request_by in db.execute(union_all(*selects)).all():
            submissions += 1
            submitters.add(("id", user_id) if user_id is not None else ("name", request_by))

        total_users = db.execute(select(func.count(User.id))).scalar_one()
        return {
            "total_users": total_users,
            "active_users_7d": len(submitters),
            "submissions_7d": submissions,
            "window_days": ENGAGEMENT_WINDOW.days,
        }

# routes/reports.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from routes.dashboard import aggregator

router = APIRouter()

@router.get("/reports_audit")
def get_reports_audit(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    """All submitted requests grouped by form; endDate is exclusive"""
    return aggregator.audit_report(db, start_date=start_date, end_date=end_date)

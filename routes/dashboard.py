# routes/dashboard.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from services.dashboard import DashboardAggregator

router = APIRouter()
aggregator = DashboardAggregator()

@router.get("/workload")
def get_workload(db: Session = Depends(get_db)):
    """Per-form status counts with pending/approved/declined buckets"""
    return aggregator.workload_summary(db)

@router.get("/outstanding")
def get_outstanding(limit: int = Query(6, ge=0, le=100), db: Session = Depends(get_db)):
    """Pending requests across all forms, newest activity first"""
    return aggregator.outstanding_queue(db, limit=limit)

@router.get("/engagement")
def get_engagement(db: Session = Depends(get_db)):
    return aggregator.engagement_summary(db)

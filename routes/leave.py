# routes/leave.py
from fastapi import APIRouter, HTTPException, Depends, status
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field
import logging

from database import get_db
from models import LeaveType, User, UserLeave
from routes.admin import commit_or_conflict

logger = logging.getLogger(__name__)

router = APIRouter()

class LeaveTypeRequest(BaseModel):
    leave_type: str = Field(..., min_length=1, max_length=128)
    leave_days: float = Field(..., ge=0)

class UserLeaveRequest(BaseModel):
    user_id: int
    leave_type: str = Field(..., min_length=1, max_length=128)
    leave_days: float = Field(..., ge=0)

# ============================================================================
# LEAVE TYPES
# ============================================================================

@router.get("/leave_types")
def get_leave_types(db: Session = Depends(get_db)):
    return [record.to_dict() for record in db.query(LeaveType).order_by(LeaveType.leave_type.asc()).all()]

@router.post("/leave_types", status_code=status.HTTP_201_CREATED)
def create_leave_type(leave_type: LeaveTypeRequest, db: Session = Depends(get_db)):
    record = LeaveType(**leave_type.model_dump())
    db.add(record)
    commit_or_conflict(db, "adding leave type")
    db.refresh(record)

    logger.info(f"✅ Leave type {record.leave_type} added")
    return record.to_dict()

@router.put("/leave_types/{leave_type_id}")
def update_leave_type(leave_type_id: int, leave_type: LeaveTypeRequest, db: Session = Depends(get_db)):
    record = db.query(LeaveType).filter(LeaveType.id == leave_type_id).first()

    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Leave type not found")

    for field, value in leave_type.model_dump().items():
        setattr(record, field, value)

    commit_or_conflict(db, "updating leave type")
    db.refresh(record)
    return record.to_dict()

@router.delete("/leave_types/{leave_type_id}")
def delete_leave_type(leave_type_id: int, db: Session = Depends(get_db)):
    record = db.query(LeaveType).filter(LeaveType.id == leave_type_id).first()

    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Leave type not found")

    db.delete(record)
    commit_or_conflict(db, "deleting leave type")
    return {"success": True, "message": "Leave type deleted successfully"}

# ============================================================================
# USER LEAVE BALANCES
# ============================================================================

def _require_user(db: Session, user_id: int):
    if not db.query(User).filter(User.id == user_id).first():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

@router.get("/user_leaves")
def get_user_leaves(db: Session = Depends(get_db)):
    return [record.to_dict() for record in db.query(UserLeave).order_by(UserLeave.id.asc()).all()]

@router.get("/user_leaves/{user_id}/{leave_type}")
def get_user_leave_balance(user_id: int, leave_type: str, db: Session = Depends(get_db)):
    """Days assigned to a user for one leave type, looked up by type name"""
    record = (
        db.query(UserLeave)
        .filter(UserLeave.user_id == user_id, UserLeave.leave_type == leave_type)
        .first()
    )

    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No leave balance for this user and leave type")

    return record.to_dict()

@router.post("/user_leaves", status_code=status.HTTP_201_CREATED)
def create_user_leave(user_leave: UserLeaveRequest, db: Session = Depends(get_db)):
    _require_user(db, user_leave.user_id)

    record = UserLeave(**user_leave.model_dump())
    db.add(record)
    commit_or_conflict(db, "adding user leave")
    db.refresh(record)

    logger.info(f"✅ {record.leave_days} day(s) of {record.leave_type} assigned to user {record.user_id}")
    return record.to_dict()

@router.put("/user_leaves/{user_leave_id}")
def update_user_leave(user_leave_id: int, user_leave: UserLeaveRequest, db: Session = Depends(get_db)):
    record = db.query(UserLeave).filter(UserLeave.id == user_leave_id).first()

    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User leave not found")
    _require_user(db, user_leave.user_id)

    for field, value in user_leave.model_dump().items():
        setattr(record, field, value)

    commit_or_conflict(db, "updating user leave")
    db.refresh(record)
    return record.to_dict()

@router.delete("/user_leaves/{user_leave_id}")
def delete_user_leave(user_leave_id: int, db: Session = Depends(get_db)):
    record = db.query(UserLeave).filter(UserLeave.id == user_leave_id).first()

    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User leave not found")

    db.delete(record)
    commit_or_conflict(db, "deleting user leave")
    return {"success": True, "message": "User leave deleted successfully"}

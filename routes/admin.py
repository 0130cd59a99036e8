"""
Forms Portal - Admin Routes
User accounts and per-user form access
"""

from fastapi import APIRouter, HTTPException, Depends, status
from sqlalchemy.orm import Session
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from database import get_db
from models import User, UserAccess
from typing import Optional
from pydantic import BaseModel, Field
from werkzeug.security import generate_password_hash
import logging

logger = logging.getLogger(__name__)

# Router
router = APIRouter()

DEFAULT_PASSWORD = "123456"

# Request Models
class UserCreateRequest(BaseModel):
    employee_id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3, max_length=255)
    role: Optional[str] = None
    password: Optional[str] = None
    branch: Optional[str] = None
    department: Optional[str] = None
    signature: Optional[str] = None
    profile_img: Optional[str] = None

class UserUpdateRequest(BaseModel):
    employee_id: Optional[str] = Field(None, min_length=1, max_length=64)
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    role: Optional[str] = None
    password: Optional[str] = None
    branch: Optional[str] = None
    department: Optional[str] = None
    signature: Optional[str] = None
    profile_img: Optional[str] = None

class UserAccessRequest(BaseModel):
    user_id: int
    role: Optional[str] = None
    access_forms: Optional[str] = None

# Utility Functions
def ensure_unique_identity(db: Session, email: Optional[str], employee_id: Optional[str], exclude_id: Optional[int] = None):
    """Reject an email or employee ID that belongs to another user"""
    clauses = []
    if email:
        clauses.append(User.email == email)
    if employee_id:
        clauses.append(User.employee_id == employee_id)
    if not clauses:
        return

    query = db.query(User).filter(or_(*clauses))
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)

    existing = query.first()
    if existing:
        field = "Email" if email and existing.email == email else "Employee ID"
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"{field} already exists")

def commit_or_conflict(db: Session, action: str):
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Integrity error while {action}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Conflict while {action}")
    except Exception:
        db.rollback()
        logger.exception(f"Error while {action}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Server error while {action}"
        )

# Routes

@router.get("/users")
def get_all_users(role: Optional[str] = None, db: Session = Depends(get_db)):
    """Get all users, oldest first"""
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    return [user.to_dict() for user in query.order_by(User.id.asc()).all()]

@router.post("/users", status_code=status.HTTP_201_CREATED)
def create_user(user_data: UserCreateRequest, db: Session = Depends(get_db)):
    """Create new user; password defaults when left blank"""
    ensure_unique_identity(db, user_data.email, user_data.employee_id)

    values = user_data.model_dump(exclude={"password"})
    new_user = User(**values, password=generate_password_hash(user_data.password or DEFAULT_PASSWORD))

    db.add(new_user)
    commit_or_conflict(db, "adding user")
    db.refresh(new_user)

    logger.info(f"👤 User {new_user.employee_id} created")
    return new_user.to_dict()

@router.put("/users/{user_id}")
def update_user(user_id: int, user_update: UserUpdateRequest, db: Session = Depends(get_db)):
    """Update existing user; the password is only replaced when one is supplied"""
    user = db.query(User).filter(User.id == user_id).first()

    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    changes = user_update.model_dump(exclude_unset=True)
    ensure_unique_identity(db, changes.get("email"), changes.get("employee_id"), exclude_id=user.id)

    password = changes.pop("password", None)
    for field, value in changes.items():
        setattr(user, field, value)
    if password:
        user.password = generate_password_hash(password)

    commit_or_conflict(db, "updating user")
    db.refresh(user)
    return user.to_dict()

@router.delete("/users/{user_id}")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.id == user_id).first()

    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    db.delete(user)
    commit_or_conflict(db, "deleting user")

    return {"success": True, "message": "User deleted successfully"}

# ============================================================================
# USER ACCESS
# ============================================================================

@router.get("/user_access")
def get_user_access(db: Session = Depends(get_db)):
    return [record.to_dict() for record in db.query(UserAccess).order_by(UserAccess.id.asc()).all()]

@router.post("/user_access", status_code=status.HTTP_201_CREATED)
def create_user_access(access: UserAccessRequest, db: Session = Depends(get_db)):
    if not db.query(User).filter(User.id == access.user_id).first():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    record = UserAccess(**access.model_dump())
    db.add(record)
    commit_or_conflict(db, "adding user access record")
    db.refresh(record)

    logger.info(f"✅ User access record added for user {record.user_id}")
    return record.to_dict()

@router.put("/user_access/{access_id}")
def update_user_access(access_id: int, access: UserAccessRequest, db: Session = Depends(get_db)):
    record = db.query(UserAccess).filter(UserAccess.id == access_id).first()

    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User access record not found")
    if not db.query(User).filter(User.id == access.user_id).first():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    for field, value in access.model_dump().items():
        setattr(record, field, value)

    commit_or_conflict(db, "updating user access record")
    db.refresh(record)
    return record.to_dict()

@router.delete("/user_access/{access_id}")
def delete_user_access(access_id: int, db: Session = Depends(get_db)):
    record = db.query(UserAccess).filter(UserAccess.id == access_id).first()

    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User access record not found")

    db.delete(record)
    commit_or_conflict(db, "deleting user access record")

    logger.info(f"🗑️ User access record {access_id} deleted")
    return {"success": True, "message": "User access record deleted successfully"}

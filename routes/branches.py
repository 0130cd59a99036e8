# routes/branches.py
from fastapi import APIRouter, HTTPException, Depends, status
from sqlalchemy.orm import Session
from typing import Optional
from pydantic import BaseModel, Field
import logging

from database import get_db
from models import Branch, Department, ExpenseCategory
from routes.admin import commit_or_conflict

logger = logging.getLogger(__name__)

router = APIRouter()

class BranchRequest(BaseModel):
    branch_name: str = Field(..., min_length=1)
    branch_code: str = Field(..., min_length=1, max_length=32)
    location: Optional[str] = None

class DepartmentRequest(BaseModel):
    department_name: str = Field(..., min_length=1)
    branch_id: int

# ============================================================================
# BRANCHES
# ============================================================================

@router.get("/branches")
def get_branches(db: Session = Depends(get_db)):
    return [branch.to_dict() for branch in db.query(Branch).order_by(Branch.id.asc()).all()]

@router.post("/branches", status_code=status.HTTP_201_CREATED)
def create_branch(branch: BranchRequest, db: Session = Depends(get_db)):
    record = Branch(**branch.model_dump())
    db.add(record)
    commit_or_conflict(db, "adding branch")
    db.refresh(record)
    return record.to_dict()

@router.put("/branches/{branch_id}")
def update_branch(branch_id: int, branch: BranchRequest, db: Session = Depends(get_db)):
    record = db.query(Branch).filter(Branch.id == branch_id).first()

    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Branch not found")

    for field, value in branch.model_dump().items():
        setattr(record, field, value)

    commit_or_conflict(db, "updating branch")
    db.refresh(record)
    return record.to_dict()

@router.delete("/branches/{branch_id}")
def delete_branch(branch_id: int, db: Session = Depends(get_db)):
    record = db.query(Branch).filter(Branch.id == branch_id).first()

    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Branch not found")

    db.delete(record)
    commit_or_conflict(db, "deleting branch")
    return {"success": True, "message": "Branch deleted successfully"}

# ============================================================================
# DEPARTMENTS
# ============================================================================

def _department_row(department: Department, branch_name: Optional[str]):
    data = department.to_dict()
    data["branch_name"] = branch_name
    return data

@router.get("/departments")
def get_departments(db: Session = Depends(get_db)):
    """Departments with their branch name, alphabetical"""
    rows = (
        db.query(Department, Branch.branch_name)
        .outerjoin(Branch, Department.branch_id == Branch.id)
        .order_by(Department.department_name.asc())
        .all()
    )
    return [_department_row(department, branch_name) for department, branch_name in rows]

def _require_branch(db: Session, branch_id: int) -> Branch:
    branch = db.query(Branch).filter(Branch.id == branch_id).first()
    if not branch:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Branch not found")
    return branch

@router.post("/departments", status_code=status.HTTP_201_CREATED)
def create_department(department: DepartmentRequest, db: Session = Depends(get_db)):
    branch = _require_branch(db, department.branch_id)

    record = Department(**department.model_dump())
    db.add(record)
    commit_or_conflict(db, "adding department")
    db.refresh(record)
    return _department_row(record, branch.branch_name)

@router.put("/departments/{department_id}")
def update_department(department_id: int, department: DepartmentRequest, db: Session = Depends(get_db)):
    record = db.query(Department).filter(Department.id == department_id).first()

    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Department not found")

    branch = _require_branch(db, department.branch_id)
    for field, value in department.model_dump().items():
        setattr(record, field, value)

    commit_or_conflict(db, "updating department")
    db.refresh(record)
    return _department_row(record, branch.branch_name)

@router.delete("/departments/{department_id}")
def delete_department(department_id: int, db: Session = Depends(get_db)):
    record = db.query(Department).filter(Department.id == department_id).first()

    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Department not found")

    db.delete(record)
    commit_or_conflict(db, "deleting department")
    return {"success": True, "message": "Department deleted successfully"}

# ============================================================================
# EXPENSE CATEGORIES
# ============================================================================

class ExpenseCategoryRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=128)
    description: Optional[str] = None
    expense_account: Optional[str] = None

@router.get("/expense_category")
def get_expense_categories(db: Session = Depends(get_db)):
    return [record.to_dict() for record in db.query(ExpenseCategory).order_by(ExpenseCategory.name.asc()).all()]

@router.post("/expense_category", status_code=status.HTTP_201_CREATED)
def create_expense_category(category: ExpenseCategoryRequest, db: Session = Depends(get_db)):
    record = ExpenseCategory(**category.model_dump())
    db.add(record)
    commit_or_conflict(db, "adding expense category")
    db.refresh(record)
    return record.to_dict()

@router.put("/expense_category/{category_id}")
def update_expense_category(category_id: int, category: ExpenseCategoryRequest, db: Session = Depends(get_db)):
    record = db.query(ExpenseCategory).filter(ExpenseCategory.id == category_id).first()

    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense category not found")

    for field, value in category.model_dump().items():
        setattr(record, field, value)

    commit_or_conflict(db, "updating expense category")
    db.refresh(record)
    return record.to_dict()

@router.delete("/expense_category/{category_id}")
def delete_expense_category(category_id: int, db: Session = Depends(get_db)):
    record = db.query(ExpenseCategory).filter(ExpenseCategory.id == category_id).first()

    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense category not found")

    db.delete(record)
    commit_or_conflict(db, "deleting expense category")
    return {"success": True, "message": "Expense category deleted successfully"}

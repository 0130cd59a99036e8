from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from database import Base
from models.base import SerializerMixin
from utils.timeutils import utc_now

class Branch(Base, SerializerMixin):
    __tablename__ = "branches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    branch_name = Column(Text, nullable=False)
    branch_code = Column(String(32), nullable=False)
    location = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), onupdate=utc_now)

    departments = relationship("Department", back_populates="branch")

class Department(Base, SerializerMixin):
    __tablename__ = "departments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    department_name = Column(Text, nullable=False)
    branch_id = Column(Integer, ForeignKey("branches.id", ondelete="SET NULL"), index=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), onupdate=utc_now)

    branch = relationship("Branch", back_populates="departments")

class ExpenseCategory(Base, SerializerMixin):
    """Lookup behind the expense category columns on cash advance and fund items."""

    __tablename__ = "expense_category"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(128), unique=True, nullable=False)
    description = Column(Text)
    expense_account = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), onupdate=utc_now)

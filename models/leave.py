from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Numeric, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from database import Base
from models.base import RequestHeaderMixin, SerializerMixin
from utils.timeutils import utc_now

class LeaveApplication(Base, RequestHeaderMixin):
    __tablename__ = "leave_application"

    leave_type = Column(Text)
    date_from = Column(Date)
    date_to = Column(Date)
    days = Column(Numeric(5, 1))
    reason = Column(Text)

class LeaveType(Base, SerializerMixin):
    """Leave categories and the default number of days allowed per year."""

    __tablename__ = "leave_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    leave_type = Column(String(128), unique=True, nullable=False)
    leave_days = Column(Numeric(5, 1), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), onupdate=utc_now)

class UserLeave(Base, SerializerMixin):
    """Leave days assigned to one user for one leave type."""

    __tablename__ = "user_leaves"
    __table_args__ = (UniqueConstraint("user_id", "leave_type", name="uq_user_leaves_user_type"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    leave_type = Column(String(128), nullable=False)
    leave_days = Column(Numeric(5, 1), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), onupdate=utc_now)

    user = relationship("User", back_populates="leaves")

from sqlalchemy import Column, Integer, Text, Date, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.base import RequestHeaderMixin, RequestItemMixin, AccountingMixin

class OvertimeApprovalRequest(Base, RequestHeaderMixin, AccountingMixin):
    __tablename__ = "overtime_approval_request"

    cutoff_from = Column(Date)
    cutoff_to = Column(Date)
    total_hours = Column(Numeric(6, 2))

    items = relationship(
        "OvertimeEntry",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="OvertimeEntry.id",
    )

class OvertimeEntry(Base, RequestItemMixin):
    __tablename__ = "overtime_approval_request_items"

    request_id = Column(Integer, ForeignKey("overtime_approval_request.id", ondelete="CASCADE"), nullable=False, index=True)
    ot_date = Column(Date, nullable=False)
    time_from = Column(Text)
    time_to = Column(Text)
    hours = Column(Numeric(6, 2), nullable=False)
    purpose = Column(Text)

    request = relationship("OvertimeApprovalRequest", back_populates="items")

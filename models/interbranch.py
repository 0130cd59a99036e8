from sqlalchemy import Column, Integer, Text, Date, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.base import RequestHeaderMixin, RequestItemMixin, DispatchMixin

class InterbranchTransferSlip(Base, RequestHeaderMixin, DispatchMixin):
    __tablename__ = "interbranch_transfer_slip"

    from_branch = Column(Text)
    to_branch = Column(Text)
    transfer_date = Column(Date)
    purpose = Column(Text)

    items = relationship(
        "InterbranchTransferSlipItem",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="InterbranchTransferSlipItem.id",
    )

class InterbranchTransferSlipItem(Base, RequestItemMixin):
    __tablename__ = "interbranch_transfer_slip_items"

    request_id = Column(Integer, ForeignKey("interbranch_transfer_slip.id", ondelete="CASCADE"), nullable=False, index=True)
    item_code = Column(Text)
    description = Column(Text, nullable=False)
    quantity = Column(Integer, nullable=False)
    unit = Column(Text)
    remarks = Column(Text)

    request = relationship("InterbranchTransferSlip", back_populates="items")

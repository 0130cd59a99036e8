from sqlalchemy import Column, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.base import RequestHeaderMixin, RequestItemMixin

class Transmittal(Base, RequestHeaderMixin):
    __tablename__ = "transmittals"

    recipient = Column(Text)
    recipient_branch = Column(Text)
    purpose = Column(Text)

    items = relationship(
        "TransmittalItem",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="TransmittalItem.id",
    )

class TransmittalItem(Base, RequestItemMixin):
    __tablename__ = "transmittals_items"

    request_id = Column(Integer, ForeignKey("transmittals.id", ondelete="CASCADE"), nullable=False, index=True)
    reference_no = Column(Text)
    description = Column(Text, nullable=False)
    quantity = Column(Integer)
    remarks = Column(Text)

    request = relationship("Transmittal", back_populates="items")

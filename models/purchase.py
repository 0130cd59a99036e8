from sqlalchemy import Column, Integer, Text, Date, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.base import RequestHeaderMixin, RequestItemMixin, AccountingMixin

class PurchaseRequest(Base, RequestHeaderMixin, AccountingMixin):
    __tablename__ = "purchase_request"

    request_date = Column(Date)
    contact_number = Column(Text)
    address = Column(Text)
    purpose = Column(Text)
    date_ordered = Column(Date)

    # Relationships
    items = relationship(
        "PurchaseRequestItem",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="PurchaseRequestItem.id",
    )

class PurchaseRequestItem(Base, RequestItemMixin):
    __tablename__ = "purchase_request_items"

    request_id = Column(Integer, ForeignKey("purchase_request.id", ondelete="CASCADE"), nullable=False, index=True)
    purchase_item = Column(Text, nullable=False)
    quantity = Column(Integer, nullable=False)

    request = relationship("PurchaseRequest", back_populates="items")

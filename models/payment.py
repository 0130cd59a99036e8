from sqlalchemy import Column, Integer, Text, Date, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.base import RequestHeaderMixin, RequestItemMixin, AccountingMixin

class PaymentRequest(Base, RequestHeaderMixin, AccountingMixin):
    __tablename__ = "payment_request"

    payee = Column(Text)
    request_date = Column(Date)
    total_amount = Column(Numeric(12, 2))
    purpose = Column(Text)

    items = relationship(
        "PaymentRequestItem",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="PaymentRequestItem.id",
    )

class PaymentRequestItem(Base, RequestItemMixin):
    __tablename__ = "payment_request_items"

    request_id = Column(Integer, ForeignKey("payment_request.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(Text, nullable=False)
    quantity = Column(Numeric(12, 2))
    unit_price = Column(Numeric(12, 2))
    amount = Column(Numeric(12, 2), nullable=False)
    budget_code = Column(Text)

    request = relationship("PaymentRequest", back_populates="items")

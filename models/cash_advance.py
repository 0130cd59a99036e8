from sqlalchemy import Column, Integer, Text, Date, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.base import RequestHeaderMixin, RequestItemMixin, AccountingMixin

class CashAdvanceRequest(Base, RequestHeaderMixin, AccountingMixin):
    __tablename__ = "cash_advance_request"

    request_date = Column(Date)
    nature_of_activity = Column(Text)
    inclusive_date_from = Column(Date)
    inclusive_date_to = Column(Date)
    total_amount = Column(Numeric(12, 2))
    purpose = Column(Text)

    items = relationship(
        "CashAdvanceRequestItem",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="CashAdvanceRequestItem.id",
    )

class CashAdvanceRequestItem(Base, RequestItemMixin):
    __tablename__ = "cash_advance_request_items"

    request_id = Column(Integer, ForeignKey("cash_advance_request.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(Text)
    amount = Column(Numeric(12, 2), nullable=False)
    exp_cat = Column(Text)
    store_branch = Column(Text)
    remarks = Column(Text)

    request = relationship("CashAdvanceRequest", back_populates="items")

class CashAdvanceLiquidation(Base, RequestHeaderMixin, AccountingMixin):
    __tablename__ = "cash_advance_liquidation"

    ca_request_code = Column(Text, index=True)
    cash_advance_amount = Column(Numeric(12, 2))
    total_expense = Column(Numeric(12, 2))
    balance = Column(Numeric(12, 2))

    items = relationship(
        "CashAdvanceLiquidationItem",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="CashAdvanceLiquidationItem.id",
    )

class CashAdvanceLiquidationItem(Base, RequestItemMixin):
    __tablename__ = "cash_advance_liquidation_items"

    request_id = Column(Integer, ForeignKey("cash_advance_liquidation.id", ondelete="CASCADE"), nullable=False, index=True)
    transaction_date = Column(Date)
    description = Column(Text)
    or_no = Column(Text)
    amount = Column(Numeric(12, 2), nullable=False)
    exp_charges = Column(Text)
    store_branch = Column(Text)
    remarks = Column(Text)

    request = relationship("CashAdvanceLiquidation", back_populates="items")

class CAReceipt(Base, RequestHeaderMixin):
    __tablename__ = "ca_receipt"

    ca_request_code = Column(Text, index=True)
    amount = Column(Numeric(12, 2))
    amount_in_words = Column(Text)
    received_date = Column(Date)

class Reimbursement(Base, RequestHeaderMixin, AccountingMixin):
    __tablename__ = "reimbursement"

    cal_request_code = Column(Text, index=True)
    total_amount = Column(Numeric(12, 2))
    purpose = Column(Text)

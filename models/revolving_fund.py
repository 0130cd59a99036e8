from sqlalchemy import Column, Integer, Text, Date, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.base import RequestHeaderMixin, RequestItemMixin, AccountingMixin

class RevolvingFund(Base, RequestHeaderMixin, AccountingMixin):
    __tablename__ = "revolving_fund"

    custodian = Column(Text)
    revolving_fund_amount = Column(Numeric(12, 2))
    replenish_amount = Column(Numeric(12, 2))
    period_from = Column(Date)
    period_to = Column(Date)

    items = relationship(
        "RevolvingFundItem",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="RevolvingFundItem.id",
    )

class RevolvingFundItem(Base, RequestItemMixin):
    __tablename__ = "revolving_fund_items"

    request_id = Column(Integer, ForeignKey("revolving_fund.id", ondelete="CASCADE"), nullable=False, index=True)
    entry_date = Column(Date)
    voucher_no = Column(Text)
    or_ref_no = Column(Text)
    amount = Column(Numeric(12, 2), nullable=False)
    expense_category = Column(Text)
    gl_account = Column(Text)
    remarks = Column(Text)

    request = relationship("RevolvingFund", back_populates="items")

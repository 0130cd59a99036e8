from sqlalchemy import Column, Text, Numeric
from database import Base
from models.base import RequestHeaderMixin

class CreditCardAcknowledgementReceipt(Base, RequestHeaderMixin):
    __tablename__ = "credit_card_acknowledgement_receipt"

    card_holder = Column(Text)
    card_last_digits = Column(Text)
    amount = Column(Numeric(12, 2))
    purpose = Column(Text)

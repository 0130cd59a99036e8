from sqlalchemy import Column, Integer, String, DateTime, func
from database import Base
from utils.timeutils import utc_now

class CodeSequence(Base):
    """Last issued reference number per form type and year."""

    __tablename__ = "code_sequences"

    form_type = Column(String(64), primary_key=True)
    year = Column(Integer, primary_key=True, autoincrement=False)
    last_value = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), onupdate=utc_now)

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, func
from datetime import date, datetime
from decimal import Decimal
from utils.timeutils import utc_now


def _jsonable(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


class SerializerMixin:
    def to_dict(self):
        """Convert model to dictionary"""
        return {column.key: _jsonable(getattr(self, column.key)) for column in self.__table__.columns}


class RequestHeaderMixin(SerializerMixin):
    """Columns shared by every form's header table."""

    id = Column(Integer, primary_key=True, autoincrement=True)
    form_code = Column(String(32), unique=True, nullable=False, index=True)
    user_id = Column(Integer, index=True)
    request_by = Column(Text, nullable=False)
    employee_id = Column(String(64))
    branch = Column(Text)
    department = Column(Text)
    status = Column(String(32), nullable=False, default="Pending", index=True)

    # Workflow
    approved_by = Column(Text)
    approved_signature = Column(Text)
    declined_reason = Column(Text)
    received_by = Column(Text)
    received_signature = Column(Text)

    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), onupdate=utc_now)

    def __repr__(self):
        return f"<{type(self).__name__}(id={self.id}, form_code='{self.form_code}', status='{self.status}')>"


class AccountingMixin:
    check_number = Column(Text)
    gl_code = Column(Text)
    po_number = Column(Text)
    or_number = Column(Text)
    completed_by = Column(Text)


class DispatchMixin:
    dispatched_by = Column(Text)
    dispatched_signature = Column(Text)


class AccomplishmentMixin:
    accomplished_by = Column(Text)
    performed_by = Column(Text)
    date_completed = Column(Date)
    remarks = Column(Text)


class RequestItemMixin(SerializerMixin):
    id = Column(Integer, primary_key=True, autoincrement=True)

from sqlalchemy import Column, Text, Date
from database import Base
from models.base import RequestHeaderMixin, AccomplishmentMixin

class MaintenanceRepairRequest(Base, RequestHeaderMixin, AccomplishmentMixin):
    __tablename__ = "maintenance_repair_request"

    request_date = Column(Date)
    location = Column(Text)
    asset_description = Column(Text)
    work_description = Column(Text)

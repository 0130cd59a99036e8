from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from database import Base
from models.base import SerializerMixin
from utils.timeutils import utc_now

class User(Base, SerializerMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(String(64), unique=True, nullable=False, index=True)
    name = Column(Text, nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(Text, nullable=False)
    role = Column(String(64), index=True)
    branch = Column(Text)
    department = Column(Text)
    signature = Column(Text)
    profile_img = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), onupdate=utc_now)

    access = relationship("UserAccess", back_populates="user", cascade="all, delete-orphan")
    leaves = relationship("UserLeave", back_populates="user", cascade="all, delete-orphan")

    def to_dict(self):
        data = super().to_dict()
        data.pop("password", None)
        return data

class UserAccess(Base, SerializerMixin):
    __tablename__ = "user_access"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(Text)
    access_forms = Column(Text)

    user = relationship("User", back_populates="access")

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from ruralcare.database import Base


class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(String(10), unique=True, index=True, nullable=False)
    name = Column(String(200))
    specialization = Column(String(200))
    hospital = Column(String(300))
    username = Column(String(100), unique=True, index=True)
    password_hash = Column(String(200))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

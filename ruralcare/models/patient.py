from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from ruralcare.database import Base


class Patient(Base):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(String(10), unique=True, index=True, nullable=False)
    name = Column(String(200))
    age = Column(Integer)
    gender = Column(String(20))
    phone = Column(String(40))
    email = Column(String(200), unique=True)  # NULLs do not collide
    address = Column(Text)
    password_hash = Column(String(200))  # bcrypt hash, or plaintext for seeded demo accounts
    profile_image = Column(Text)  # base64 data URL or file reference
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

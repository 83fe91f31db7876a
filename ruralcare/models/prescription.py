from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from sqlalchemy.sql import func
from ruralcare.database import Base


class Prescription(Base):
    __tablename__ = "prescriptions"

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(String(40), unique=True, index=True, nullable=False)
    patient_id = Column(String(10), index=True, nullable=False)
    doctor_id = Column(String(10), nullable=False)
    doctor_name = Column(String(200))
    patient_name = Column(String(200))
    remarks = Column(Text)
    file_url = Column(String(1000))
    medicines = Column(JSON, default=list)  # [{"name", "dosage", "instructions"}]
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class PatientHistoryEntry(Base):
    """Seeded medication history shown on the patient dashboard."""

    __tablename__ = "patient_history"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(String(10), index=True, nullable=False)
    medicine = Column(String(200))
    date = Column(String(50))
    remarks_label = Column(String(200))
    remarks = Column(Text)

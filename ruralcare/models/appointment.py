from enum import Enum
from sqlalchemy import Column, Integer, String, Text, DateTime, Index
from sqlalchemy.sql import func
from ruralcare.database import Base


class AppointmentStatus(str, Enum):
    UPCOMING = "upcoming"
    COMPLETED = "completed"
    CANCELLED = "cancelled"  # modeled, nothing sets it yet


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (Index("ix_appointments_doctor_date", "doctor_id", "date"),)

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(String(40), unique=True, index=True, nullable=False)
    patient_id = Column(String(10), index=True, nullable=False)
    doctor_id = Column(String(10), nullable=False)
    # Snapshots taken at booking time
    doctor_name = Column(String(200))
    patient_name = Column(String(200))
    date = Column(String(10), nullable=False)  # YYYY-MM-DD
    time = Column(String(5), nullable=False)  # HH:MM
    duration_minutes = Column(Integer, default=30)
    status = Column(String(20), default=AppointmentStatus.UPCOMING.value, index=True)
    reason_for_visit = Column(Text)
    summary = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

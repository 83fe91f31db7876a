from datetime import datetime
from typing import Optional
from pydantic import Field
from ruralcare.schemas.common import CamelModel
from ruralcare.schemas.appointment import AppointmentResponse


class DoctorCreate(CamelModel):
    name: Optional[str] = None
    specialization: Optional[str] = None
    hospital: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


class DoctorResponse(CamelModel):
    """Never carries the stored credential."""
    doctor_id: str
    name: Optional[str] = None
    specialization: Optional[str] = None
    hospital: Optional[str] = None
    username: Optional[str] = None
    created_at: Optional[datetime] = None


class DoctorDashboard(CamelModel):
    doctor: DoctorResponse
    appointments: list[AppointmentResponse] = Field(default_factory=list)

from datetime import datetime
from typing import Optional, Union
from ruralcare.schemas.common import CamelModel


class AppointmentCreate(CamelModel):
    # Optional here so a missing field is reported as a 400 by the scheduler
    patient_id: Optional[str] = None
    doctor_id: Optional[str] = None
    doctor_name: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    reason_for_visit: Optional[str] = None
    duration_minutes: Optional[Union[int, str]] = None


class RescheduleRequest(CamelModel):
    appointment_id: Optional[str] = None
    new_date: Optional[str] = None
    new_time: Optional[str] = None


class SummaryRequest(CamelModel):
    summary: Optional[str] = None


class AppointmentResponse(CamelModel):
    appointment_id: str
    patient_id: str
    doctor_id: str
    doctor_name: Optional[str] = None
    patient_name: Optional[str] = None
    date: str
    time: str
    duration_minutes: Optional[int] = 30
    status: str
    reason_for_visit: Optional[str] = None
    summary: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

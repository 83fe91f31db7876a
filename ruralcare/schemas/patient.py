from datetime import datetime
from typing import Optional
from pydantic import Field
from ruralcare.schemas.common import CamelModel
from ruralcare.schemas.appointment import AppointmentResponse


class PatientSignup(CamelModel):
    name: Optional[str] = None
    password: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None


class PatientUpdate(CamelModel):
    name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    profile_image: Optional[str] = None


class PatientResponse(CamelModel):
    patient_id: str
    name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    profile_image: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class HistoryEntryResponse(CamelModel):
    medicine: Optional[str] = None
    date: Optional[str] = None
    remarks_label: Optional[str] = None
    remarks: Optional[str] = None


class PatientDashboard(CamelModel):
    patient: PatientResponse
    appointments: list[AppointmentResponse] = Field(default_factory=list)
    history: list[HistoryEntryResponse] = Field(default_factory=list)

from datetime import datetime
from typing import Optional
from pydantic import Field
from ruralcare.schemas.common import CamelModel


class Medicine(CamelModel):
    name: Optional[str] = None
    dosage: Optional[str] = None
    instructions: Optional[str] = None


class PrescriptionSave(CamelModel):
    appointment_id: Optional[str] = None
    patient_id: Optional[str] = None
    doctor_id: Optional[str] = None
    doctor_name: Optional[str] = None
    patient_name: Optional[str] = None
    remarks: Optional[str] = None
    medicines: Optional[list[Medicine]] = None


class PrescriptionResponse(CamelModel):
    appointment_id: str
    patient_id: str
    doctor_id: str
    doctor_name: Optional[str] = None
    patient_name: Optional[str] = None
    remarks: Optional[str] = None
    file_url: Optional[str] = None
    medicines: list[Medicine] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

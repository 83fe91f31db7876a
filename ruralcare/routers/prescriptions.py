from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from ruralcare.database import get_db
from ruralcare.schemas.prescription import PrescriptionResponse, PrescriptionSave
from ruralcare.services.prescription_service import prescription_service

router = APIRouter()


@router.post("", response_model=PrescriptionResponse, status_code=201)
async def save_prescription(data: PrescriptionSave, db: AsyncSession = Depends(get_db)):
    medicines = [m.model_dump() for m in data.medicines] if data.medicines is not None else None
    return await prescription_service.save(
        db,
        appointment_id=data.appointment_id,
        patient_id=data.patient_id,
        doctor_id=data.doctor_id,
        doctor_name=data.doctor_name,
        patient_name=data.patient_name,
        remarks=data.remarks,
        medicines=medicines,
    )


@router.get("/by-appointment/{appointment_id}", response_model=PrescriptionResponse)
async def prescription_by_appointment(appointment_id: str, db: AsyncSession = Depends(get_db)):
    return await prescription_service.by_appointment(db, appointment_id)


@router.get("/by-patient/{patient_id}", response_model=list[PrescriptionResponse])
async def prescriptions_by_patient(patient_id: str, db: AsyncSession = Depends(get_db)):
    return await prescription_service.by_patient(db, patient_id)


@router.post("/upload", status_code=201)
async def upload_prescription(
    patient_id: Optional[str] = Form(None, alias="patientId"),
    file: Optional[UploadFile] = File(None),
    db: AsyncSession = Depends(get_db),
):
    pres = await prescription_service.upload_scan(db, patient_id, file)
    return {"ok": True, "appointmentId": pres.appointment_id, "fileUrl": pres.file_url}

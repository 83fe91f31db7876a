import logging
from typing import Optional
from fastapi import UploadFile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from ruralcare.exceptions import NotFoundError, ValidationError
from ruralcare.models.prescription import Prescription
from ruralcare.services.identifier_service import time_tokens
from ruralcare.services.upload_service import upload_service

logger = logging.getLogger(__name__)

UPLOAD_PREFIX = "UP-"
UNKNOWN_DOCTOR = "UNKNOWN"


class PrescriptionService:
    async def save(
        self,
        db: AsyncSession,
        appointment_id: Optional[str],
        patient_id: Optional[str],
        doctor_id: Optional[str],
        doctor_name: Optional[str] = None,
        patient_name: Optional[str] = None,
        remarks: Optional[str] = None,
        medicines: Optional[list[dict]] = None,
    ) -> Prescription:
        """Doctor-submitted prescription, upserted by appointment id.

        On update, fields left empty keep their stored value.
        """
        if not appointment_id or not patient_id or not doctor_id:
            raise ValidationError("Missing required fields")

        pres = await db.scalar(select(Prescription).where(Prescription.appointment_id == appointment_id))
        if pres is None:
            pres = Prescription(
                appointment_id=appointment_id,
                patient_id=patient_id,
                doctor_id=doctor_id,
                doctor_name=doctor_name,
                patient_name=patient_name,
                remarks=remarks or "",
                medicines=medicines or [],
            )
            db.add(pres)
        else:
            pres.doctor_name = doctor_name or pres.doctor_name
            pres.patient_name = patient_name or pres.patient_name
            pres.remarks = remarks or pres.remarks
            pres.medicines = medicines or pres.medicines

        await db.commit()
        await db.refresh(pres)
        return pres

    async def upload_scan(self, db: AsyncSession, patient_id: Optional[str], file: Optional[UploadFile]) -> Prescription:
        """Patient-uploaded scan: always a new record with no structured medicines."""
        if not patient_id or file is None or not file.filename:
            raise ValidationError("Missing file or patientId")

        file_url, _ = await upload_service.save(file)
        pres = Prescription(
            appointment_id=time_tokens.next(UPLOAD_PREFIX),
            patient_id=patient_id,
            doctor_id=UNKNOWN_DOCTOR,
            doctor_name="",
            patient_name="",
            remarks="Uploaded prescription file",
            file_url=file_url,
            medicines=[],
        )
        db.add(pres)
        await db.commit()
        await db.refresh(pres)
        logger.info("Stored uploaded prescription %s for %s", file_url, patient_id)
        return pres

    async def by_appointment(self, db: AsyncSession, appointment_id: str) -> Prescription:
        pres = await db.scalar(select(Prescription).where(Prescription.appointment_id == appointment_id))
        if not pres:
            raise NotFoundError("No prescription for this appointment")
        return pres

    async def by_patient(self, db: AsyncSession, patient_id: str) -> list[Prescription]:
        result = await db.execute(
            select(Prescription).where(Prescription.patient_id == patient_id).order_by(Prescription.id)
        )
        return list(result.scalars().all())


prescription_service = PrescriptionService()

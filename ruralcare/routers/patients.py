from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from ruralcare.database import get_db
from ruralcare.exceptions import ConflictError, NotFoundError
from ruralcare.models.appointment import Appointment
from ruralcare.models.patient import Patient
from ruralcare.models.prescription import PatientHistoryEntry
from ruralcare.schemas.appointment import AppointmentResponse
from ruralcare.schemas.patient import HistoryEntryResponse, PatientDashboard, PatientResponse, PatientUpdate

router = APIRouter()


async def _get_patient(db: AsyncSession, patient_id: str) -> Patient:
    patient = await db.scalar(select(Patient).where(Patient.patient_id == patient_id))
    if not patient:
        raise NotFoundError("Patient not found")
    return patient


@router.get("/{patient_id}", response_model=PatientResponse)
async def get_patient(patient_id: str, db: AsyncSession = Depends(get_db)):
    return PatientResponse.model_validate(await _get_patient(db, patient_id))


@router.get("/{patient_id}/dashboard", response_model=PatientDashboard)
async def patient_dashboard(patient_id: str, db: AsyncSession = Depends(get_db)):
    patient = await _get_patient(db, patient_id)

    appts = await db.execute(
        select(Appointment)
        .where(Appointment.patient_id == patient_id)
        .order_by(Appointment.date, Appointment.time)
    )
    history = await db.execute(
        select(PatientHistoryEntry)
        .where(PatientHistoryEntry.patient_id == patient_id)
        .order_by(PatientHistoryEntry.id)
    )
    return PatientDashboard(
        patient=PatientResponse.model_validate(patient),
        appointments=[AppointmentResponse.model_validate(a) for a in appts.scalars().all()],
        history=[HistoryEntryResponse.model_validate(h) for h in history.scalars().all()],
    )


@router.put("/{patient_id}", response_model=PatientResponse)
async def update_patient(patient_id: str, data: PatientUpdate, db: AsyncSession = Depends(get_db)):
    patient = await _get_patient(db, patient_id)

    update_data = data.model_dump(exclude_unset=True)
    new_email = update_data.get("email")
    if new_email and new_email != patient.email:
        taken = await db.scalar(
            select(Patient.id).where(Patient.email == new_email, Patient.patient_id != patient_id)
        )
        if taken:
            raise ConflictError("Email already registered")
    if "email" in update_data and not new_email:
        update_data["email"] = None

    for key, value in update_data.items():
        setattr(patient, key, value)

    await db.commit()
    await db.refresh(patient)
    return PatientResponse.model_validate(patient)

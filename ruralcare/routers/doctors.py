from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from ruralcare.database import get_db
from ruralcare.exceptions import NotFoundError
from ruralcare.models.appointment import Appointment
from ruralcare.models.doctor import Doctor
from ruralcare.schemas.appointment import AppointmentResponse
from ruralcare.schemas.doctor import DoctorDashboard, DoctorResponse
from ruralcare.services.account_service import account_service

router = APIRouter()


@router.get("", response_model=list[DoctorResponse])
async def list_doctors(db: AsyncSession = Depends(get_db)):
    """Doctors offered on the booking form."""
    return await account_service.list_doctors(db)


@router.get("/{doctor_id}/dashboard", response_model=DoctorDashboard)
async def doctor_dashboard(doctor_id: str, db: AsyncSession = Depends(get_db)):
    doctor = await db.scalar(select(Doctor).where(Doctor.doctor_id == doctor_id))
    if not doctor:
        raise NotFoundError("Doctor not found")

    appts = await db.execute(
        select(Appointment)
        .where(Appointment.doctor_id == doctor_id)
        .order_by(Appointment.date, Appointment.time)
    )
    return DoctorDashboard(
        doctor=DoctorResponse.model_validate(doctor),
        appointments=[AppointmentResponse.model_validate(a) for a in appts.scalars().all()],
    )

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from ruralcare.database import get_db
from ruralcare.schemas.appointment import (
    AppointmentCreate,
    AppointmentResponse,
    RescheduleRequest,
    SummaryRequest,
)
from ruralcare.services.lifecycle_service import lifecycle_service
from ruralcare.services.scheduling_service import scheduling_service

router = APIRouter()


@router.post("", response_model=AppointmentResponse, status_code=201)
async def book_appointment(data: AppointmentCreate, db: AsyncSession = Depends(get_db)):
    """Book a 30 or 60 minute slot. 409 if it overlaps the doctor's other bookings that day."""
    return await scheduling_service.book(
        db,
        patient_id=data.patient_id,
        doctor_id=data.doctor_id,
        date=data.date,
        time=data.time,
        doctor_name=data.doctor_name,
        reason_for_visit=data.reason_for_visit,
        duration_minutes=data.duration_minutes,
    )


@router.get("", response_model=list[AppointmentResponse])
async def list_appointments(
    doctor_id: Optional[str] = Query(None, alias="doctorId"),
    db: AsyncSession = Depends(get_db),
):
    return await scheduling_service.list_appointments(db, doctor_id=doctor_id)


@router.post("/reschedule")
async def reschedule_appointment(data: RescheduleRequest, db: AsyncSession = Depends(get_db)):
    await scheduling_service.reschedule(db, data.appointment_id, data.new_date, data.new_time)
    return {"ok": True}


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(appointment_id: str, db: AsyncSession = Depends(get_db)):
    return await scheduling_service.get(db, appointment_id)


@router.post("/{appointment_id}/summary")
async def complete_appointment(
    appointment_id: str,
    data: Optional[SummaryRequest] = None,
    db: AsyncSession = Depends(get_db),
):
    """Doctor finishes the visit: status -> completed, summary copied to the prescription."""
    await lifecycle_service.complete(db, appointment_id, data.summary if data else None)
    return {"ok": True}

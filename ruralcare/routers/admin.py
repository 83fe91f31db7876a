from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from ruralcare.auth import UserPrincipal, require_admin
from ruralcare.database import get_db
from ruralcare.schemas.doctor import DoctorCreate, DoctorResponse
from ruralcare.services.account_service import account_service
from ruralcare.services.email_service import email_service
from ruralcare.services.reminder_service import MODE_24H, reminder_service

router = APIRouter()


@router.post("/doctors", response_model=DoctorResponse, status_code=201)
async def create_doctor(
    data: DoctorCreate,
    db: AsyncSession = Depends(get_db),
    admin: UserPrincipal = Depends(require_admin),
):
    """New doctors are numbered from D006 and always get a hashed password."""
    return await account_service.create_doctor(
        db,
        name=data.name,
        username=data.username,
        password=data.password,
        specialization=data.specialization,
        hospital=data.hospital,
    )


@router.get("/doctors", response_model=list[DoctorResponse])
async def list_doctors(
    db: AsyncSession = Depends(get_db),
    admin: UserPrincipal = Depends(require_admin),
):
    return await account_service.list_doctors(db)


@router.delete("/doctors/{doctor_id}")
async def delete_doctor(
    doctor_id: str,
    db: AsyncSession = Depends(get_db),
    admin: UserPrincipal = Depends(require_admin),
):
    await account_service.delete_doctor(db, doctor_id)
    return {"ok": True}


@router.post("/send-upcoming-reminders")
async def send_upcoming_reminders(
    mode: str = Query(MODE_24H, description="24h (today and tomorrow) or 7d (a week ahead)"),
    db: AsyncSession = Depends(get_db),
    admin: UserPrincipal = Depends(require_admin),
):
    count = await reminder_service.send_upcoming_reminders(db, email_service, mode=mode)
    return {"ok": True, "count": count}

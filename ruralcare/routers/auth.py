from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from ruralcare.database import get_db
from ruralcare.schemas.auth import LoginRequest
from ruralcare.schemas.patient import PatientSignup
from ruralcare.services.account_service import account_service

router = APIRouter()


@router.post("/login/patient")
async def login_patient(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Body: {"username": "<patientId>", "password": "..."}"""
    return await account_service.login_patient(db, body.username, body.password)


@router.post("/signup/patient", status_code=201)
async def signup_patient(body: PatientSignup, db: AsyncSession = Depends(get_db)):
    patient = await account_service.signup_patient(
        db,
        name=body.name,
        password=body.password,
        age=body.age,
        gender=body.gender,
        phone=body.phone,
        email=body.email,
        address=body.address,
    )
    return {"patientId": patient.patient_id}


@router.post("/login/doctor")
async def login_doctor(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    return await account_service.login_doctor(db, body.username, body.password)


@router.post("/login/admin")
async def login_admin(body: LoginRequest):
    return await account_service.login_admin(body.username, body.password)

"""
Logins, patient signup and admin-managed doctor accounts.

New accounts always store a bcrypt hash. Seeded demo accounts keep their
plaintext password and still log in; see credential_service.
"""

import asyncio
import logging
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from ruralcare.auth import ROLE_ADMIN, ROLE_DOCTOR, ROLE_PATIENT, create_token
from ruralcare.config import get_settings
from ruralcare.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from ruralcare.models.doctor import Doctor
from ruralcare.models.patient import Patient
from ruralcare.services.credential_service import hash_secret, verify_secret
from ruralcare.services.identifier_service import (
    DOCTOR_FLOOR,
    DOCTOR_PREFIX,
    PATIENT_FLOOR,
    PATIENT_PREFIX,
    insert_with_next_identifier,
)

logger = logging.getLogger(__name__)


def _require_credentials(username: Optional[str], password: Optional[str]) -> None:
    if not username or not password:
        raise ValidationError("Missing credentials")


async def _hash_new_password(password: str) -> str:
    try:
        return await asyncio.to_thread(hash_secret, password, get_settings().bcrypt_rounds)
    except ValueError as e:
        raise ValidationError(str(e))


class AccountService:
    async def login_patient(self, db: AsyncSession, username: Optional[str], password: Optional[str]) -> dict:
        """`username` is the patient id."""
        _require_credentials(username, password)
        patient = await db.scalar(select(Patient).where(Patient.patient_id == username))
        if not patient or not await asyncio.to_thread(verify_secret, password, patient.password_hash):
            logger.info("Failed patient login for %s", username)
            raise AuthenticationError("Invalid login")
        return {
            "patientId": patient.patient_id,
            "name": patient.name,
            "access_token": create_token(patient.patient_id, ROLE_PATIENT, patient.name or ""),
        }

    async def login_doctor(self, db: AsyncSession, username: Optional[str], password: Optional[str]) -> dict:
        _require_credentials(username, password)
        doctor = await db.scalar(select(Doctor).where(Doctor.username == username))
        if not doctor or not await asyncio.to_thread(verify_secret, password, doctor.password_hash):
            logger.info("Failed doctor login for %s", username)
            raise AuthenticationError("Invalid login")
        return {
            "doctorId": doctor.doctor_id,
            "name": doctor.name,
            "specialization": doctor.specialization,
            "access_token": create_token(doctor.doctor_id, ROLE_DOCTOR, doctor.name or ""),
        }

    async def login_admin(self, username: Optional[str], password: Optional[str]) -> dict:
        settings = get_settings()
        if username != settings.admin_username or not await asyncio.to_thread(
            verify_secret, password, settings.admin_password
        ):
            logger.info("Failed admin login for %s", username)
            raise AuthenticationError("Invalid admin credentials")
        return {"ok": True, "access_token": create_token(username, ROLE_ADMIN, "Admin")}

    async def signup_patient(
        self,
        db: AsyncSession,
        name: Optional[str],
        password: Optional[str],
        age: Optional[int] = None,
        gender: Optional[str] = None,
        phone: Optional[str] = None,
        email: Optional[str] = None,
        address: Optional[str] = None,
    ) -> Patient:
        if not name or not password:
            raise ValidationError("Name and password are required")
        email = email or None
        if email and await db.scalar(select(Patient.id).where(Patient.email == email)):
            raise ConflictError("Email already registered")

        hashed = await _hash_new_password(password)
        patient = await insert_with_next_identifier(
            db,
            Patient.patient_id,
            PATIENT_PREFIX,
            PATIENT_FLOOR,
            lambda patient_id: Patient(
                patient_id=patient_id,
                name=name,
                age=age,
                gender=gender,
                phone=phone,
                email=email,
                address=address,
                password_hash=hashed,
            ),
        )
        logger.info("Registered patient %s", patient.patient_id)
        return patient

    async def create_doctor(
        self,
        db: AsyncSession,
        name: Optional[str],
        username: Optional[str],
        password: Optional[str],
        specialization: Optional[str] = None,
        hospital: Optional[str] = None,
    ) -> Doctor:
        if not name or not username or not password:
            raise ValidationError("Name, username and password are required")
        if await db.scalar(select(Doctor.id).where(Doctor.username == username)):
            raise ConflictError("Username already exists")

        hashed = await _hash_new_password(password)
        doctor = await insert_with_next_identifier(
            db,
            Doctor.doctor_id,
            DOCTOR_PREFIX,
            DOCTOR_FLOOR,
            lambda doctor_id: Doctor(
                doctor_id=doctor_id,
                name=name,
                specialization=specialization,
                hospital=hospital,
                username=username,
                password_hash=hashed,
            ),
        )
        logger.info("Created doctor %s (%s)", doctor.doctor_id, username)
        return doctor

    async def list_doctors(self, db: AsyncSession) -> list[Doctor]:
        result = await db.execute(select(Doctor).order_by(Doctor.doctor_id))
        return list(result.scalars().all())

    async def delete_doctor(self, db: AsyncSession, doctor_id: str) -> None:
        doctor = await db.scalar(select(Doctor).where(Doctor.doctor_id == doctor_id))
        if not doctor:
            raise NotFoundError(f"Doctor {doctor_id} not found")
        await db.delete(doctor)
        await db.commit()
        logger.info("Deleted doctor %s", doctor_id)


account_service = AccountService()

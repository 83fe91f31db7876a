"""
Appointment booking and rescheduling.

Invariant: for one doctor on one day, no two non-cancelled appointments'
[time, time + duration) intervals overlap. Every booking and reschedule
re-checks it against all of that doctor's appointments for the day.
"""

import logging
import re
from datetime import date as date_cls
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from ruralcare.exceptions import ConflictError, NotFoundError, ValidationError
from ruralcare.models.appointment import Appointment, AppointmentStatus
from ruralcare.models.patient import Patient
from ruralcare.services.identifier_service import time_tokens
from ruralcare.services.locks import KeyedLocks

logger = logging.getLogger(__name__)

DEFAULT_DURATION = 30
SUPPORTED_DURATIONS = (30, 60)
APPOINTMENT_PREFIX = "A-"

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def to_minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def times_overlap(start_a: str, dur_a: int, start_b: str, dur_b: int) -> bool:
    """Half-open interval overlap; B starting exactly when A ends is not an overlap."""
    a_start = to_minutes(start_a)
    b_start = to_minutes(start_b)
    return a_start < b_start + dur_b and b_start < a_start + dur_a


def parse_clock_time(value: str) -> str:
    """Validate H:MM / HH:MM and return it zero padded."""
    match = _TIME_RE.match((value or "").strip())
    if not match:
        raise ValidationError(f"Invalid time '{value}', expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValidationError(f"Invalid time '{value}', expected HH:MM")
    return f"{hours:02d}:{minutes:02d}"


def parse_calendar_date(value: str) -> str:
    value = (value or "").strip()
    try:
        if len(value) != 10:
            raise ValueError(value)
        return date_cls.fromisoformat(value).isoformat()
    except ValueError:
        raise ValidationError(f"Invalid date '{value}', expected YYYY-MM-DD")


def normalize_duration(value) -> int:
    """60 stays 60; anything else, including None, becomes the 30 minute default."""
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        return DEFAULT_DURATION
    return minutes if minutes in SUPPORTED_DURATIONS else DEFAULT_DURATION


class SchedulingService:
    def __init__(self):
        self._slot_locks = KeyedLocks()

    async def _active_appointments(
        self,
        db: AsyncSession,
        doctor_id: str,
        day: str,
        exclude_appointment_id: Optional[str] = None,
    ) -> list[Appointment]:
        query = select(Appointment).where(
            Appointment.doctor_id == doctor_id,
            Appointment.date == day,
            Appointment.status != AppointmentStatus.CANCELLED.value,
        )
        if exclude_appointment_id:
            query = query.where(Appointment.appointment_id != exclude_appointment_id)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    def _first_conflict(existing: list[Appointment], time: str, duration: int) -> Optional[Appointment]:
        for appt in existing:
            if times_overlap(appt.time, appt.duration_minutes or DEFAULT_DURATION, time, duration):
                return appt
        return None

    async def book(
        self,
        db: AsyncSession,
        patient_id: Optional[str],
        doctor_id: Optional[str],
        date: Optional[str],
        time: Optional[str],
        doctor_name: Optional[str] = None,
        reason_for_visit: Optional[str] = None,
        duration_minutes=None,
    ) -> Appointment:
        if not patient_id or not doctor_id or not date or not time:
            raise ValidationError("Missing required fields")
        day = parse_calendar_date(date)
        start = parse_clock_time(time)
        duration = normalize_duration(duration_minutes)

        async with self._slot_locks.hold((doctor_id, day)):
            existing = await self._active_appointments(db, doctor_id, day)
            clash = self._first_conflict(existing, start, duration)
            if clash:
                logger.info(
                    "Booking rejected: %s %s %s overlaps %s",
                    doctor_id, day, start, clash.appointment_id,
                )
                raise ConflictError("This slot is already booked.")

            patient = await db.scalar(select(Patient).where(Patient.patient_id == patient_id))
            appt = Appointment(
                appointment_id=time_tokens.next(APPOINTMENT_PREFIX),
                patient_id=patient_id,
                doctor_id=doctor_id,
                doctor_name=doctor_name,
                patient_name=(patient.name or "") if patient else "",
                date=day,
                time=start,
                duration_minutes=duration,
                reason_for_visit=reason_for_visit,
                status=AppointmentStatus.UPCOMING.value,
            )
            db.add(appt)
            await db.commit()
            await db.refresh(appt)
        logger.info("Booked %s with %s on %s at %s", appt.appointment_id, doctor_id, day, start)
        return appt

    async def reschedule(
        self,
        db: AsyncSession,
        appointment_id: Optional[str],
        new_date: Optional[str],
        new_time: Optional[str],
    ) -> Appointment:
        if not appointment_id or not new_date or not new_time:
            raise ValidationError("Missing required fields")
        day = parse_calendar_date(new_date)
        start = parse_clock_time(new_time)

        appt = await db.scalar(select(Appointment).where(Appointment.appointment_id == appointment_id))
        if not appt:
            raise NotFoundError("Appointment not found")

        async with self._slot_locks.hold((appt.doctor_id, day)):
            others = await self._active_appointments(db, appt.doctor_id, day, exclude_appointment_id=appointment_id)
            duration = appt.duration_minutes or DEFAULT_DURATION
            clash = self._first_conflict(others, start, duration)
            if clash:
                logger.info(
                    "Reschedule of %s rejected: %s %s overlaps %s",
                    appointment_id, day, start, clash.appointment_id,
                )
                raise ConflictError("Slot already booked.")

            appt.date = day
            appt.time = start
            await db.commit()
        logger.info("Rescheduled %s to %s %s", appointment_id, day, start)
        return appt

    async def get(self, db: AsyncSession, appointment_id: str) -> Appointment:
        appt = await db.scalar(select(Appointment).where(Appointment.appointment_id == appointment_id))
        if not appt:
            raise NotFoundError("Appointment not found")
        return appt

    async def list_appointments(self, db: AsyncSession, doctor_id: Optional[str] = None) -> list[Appointment]:
        query = select(Appointment).order_by(Appointment.date, Appointment.time)
        if doctor_id:
            query = query.where(Appointment.doctor_id == doctor_id)
        result = await db.execute(query)
        return list(result.scalars().all())


scheduling_service = SchedulingService()

"""
Reminder selection: which upcoming appointments get an e-mail right now.

  24h (default)  appointments dated today or tomorrow; also used for any
                 unrecognised mode
  7d             appointments dated exactly seven days ahead

Days are UTC calendar days.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from ruralcare.models.appointment import Appointment, AppointmentStatus
from ruralcare.models.doctor import Doctor
from ruralcare.models.patient import Patient

logger = logging.getLogger(__name__)

MODE_24H = "24h"
MODE_7D = "7d"


def reminder_window(mode: str, now: datetime) -> tuple[str, str]:
    """Closed (start, end) range of ISO dates for `mode`."""
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    today = now.date()

    if mode == MODE_7D:
        target = (today + timedelta(days=7)).isoformat()
        return target, target
    if mode != MODE_24H:
        logger.warning("Unknown reminder mode %r, using %s", mode, MODE_24H)
    return today.isoformat(), (today + timedelta(days=1)).isoformat()


class ReminderService:
    async def due_appointments(self, db: AsyncSession, mode: str, now: datetime) -> list[Appointment]:
        start, end = reminder_window(mode, now)
        result = await db.execute(
            select(Appointment)
            .where(
                Appointment.status == AppointmentStatus.UPCOMING.value,
                Appointment.date >= start,
                Appointment.date <= end,
            )
            .order_by(Appointment.date, Appointment.time)
        )
        return list(result.scalars().all())

    async def send_upcoming_reminders(
        self,
        db: AsyncSession,
        notifier,
        mode: str = MODE_24H,
        now: Optional[datetime] = None,
    ) -> int:
        """Notify every due appointment's patient. Returns the number delivered.

        A failed send is logged and skipped; it does not stop the batch.
        """
        now = now or datetime.now(timezone.utc)
        appointments = await self.due_appointments(db, mode, now)
        if not appointments:
            return 0

        patient_ids = {a.patient_id for a in appointments}
        doctor_ids = {a.doctor_id for a in appointments}
        patients = await db.execute(select(Patient).where(Patient.patient_id.in_(patient_ids)))
        doctors = await db.execute(select(Doctor).where(Doctor.doctor_id.in_(doctor_ids)))
        patient_map = {p.patient_id: p for p in patients.scalars().all()}
        doctor_map = {d.doctor_id: d for d in doctors.scalars().all()}

        sent = 0
        for appt in appointments:
            patient = patient_map.get(appt.patient_id)
            if patient is None:
                logger.warning("Skipping reminder for %s: patient %s not found", appt.appointment_id, appt.patient_id)
                continue
            try:
                delivered = await notifier.send_appointment_reminder(appt, patient, doctor_map.get(appt.doctor_id))
            except Exception:
                logger.exception("Reminder email error for %s", appt.appointment_id)
                continue
            if delivered:
                sent += 1

        logger.info("Sent %d of %d %s reminders", sent, len(appointments), mode)
        return sent


reminder_service = ReminderService()

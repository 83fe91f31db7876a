import logging
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from ruralcare.exceptions import ConflictError, NotFoundError
from ruralcare.models.appointment import Appointment, AppointmentStatus
from ruralcare.models.prescription import Prescription
from ruralcare.services.locks import KeyedLocks

logger = logging.getLogger(__name__)


class LifecycleService:
    def __init__(self):
        self._appointment_locks = KeyedLocks()

    async def complete(self, db: AsyncSession, appointment_id: str, summary: Optional[str]) -> Appointment:
        """Mark the visit completed and record the summary as prescription remarks.

        Both rows are written in one commit. Repeating the call only moves the
        remarks to the latest summary; concurrent calls for the same
        appointment run one after the other.
        """
        async with self._appointment_locks.hold(appointment_id):
            appt = await db.scalar(select(Appointment).where(Appointment.appointment_id == appointment_id))
            if not appt:
                raise NotFoundError("Appointment not found")
            if appt.status == AppointmentStatus.CANCELLED.value:
                raise ConflictError("Cancelled appointments cannot be completed")

            text = summary or ""
            appt.status = AppointmentStatus.COMPLETED.value
            appt.summary = text

            pres = await db.scalar(select(Prescription).where(Prescription.appointment_id == appointment_id))
            if pres is None:
                pres = Prescription(appointment_id=appointment_id, medicines=[])
                db.add(pres)
            pres.patient_id = appt.patient_id
            pres.doctor_id = appt.doctor_id
            pres.doctor_name = appt.doctor_name
            pres.patient_name = appt.patient_name
            pres.remarks = text

            await db.commit()
        logger.info("Appointment %s completed", appointment_id)
        return appt


lifecycle_service = LifecycleService()

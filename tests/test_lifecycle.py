"""
Tests for appointment completion and prescription upserts.
"""
import asyncio

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from ruralcare.exceptions import ConflictError, NotFoundError, ValidationError
from ruralcare.models.appointment import Appointment, AppointmentStatus
from ruralcare.models.prescription import Prescription
from ruralcare.services.lifecycle_service import lifecycle_service
from ruralcare.services.prescription_service import prescription_service

pytestmark = pytest.mark.asyncio


@pytest.fixture
async def appointment(db):
    appt = Appointment(
        appointment_id="A100",
        patient_id="P001",
        doctor_id="D001",
        doctor_name="Dr. Alan Brown",
        patient_name="John Doe",
        date="2025-11-03",
        time="10:00",
        duration_minutes=30,
        status=AppointmentStatus.UPCOMING.value,
    )
    db.add(appt)
    await db.commit()
    return appt


async def _prescriptions_for(db, appointment_id):
    result = await db.execute(select(Prescription).where(Prescription.appointment_id == appointment_id))
    return result.scalars().all()


class TestComplete:
    async def test_sets_status_summary_and_prescription(self, db, appointment):
        appt = await lifecycle_service.complete(db, "A100", "Rest and fluids.")

        assert appt.status == AppointmentStatus.COMPLETED.value
        assert appt.summary == "Rest and fluids."
        [pres] = await _prescriptions_for(db, "A100")
        assert pres.remarks == "Rest and fluids."
        assert (pres.patient_id, pres.doctor_id) == ("P001", "D001")
        assert (pres.patient_name, pres.doctor_name) == ("John Doe", "Dr. Alan Brown")

    async def test_twice_keeps_one_prescription_with_last_summary(self, db, appointment):
        await lifecycle_service.complete(db, "A100", "first")
        await lifecycle_service.complete(db, "A100", "second")

        prescriptions = await _prescriptions_for(db, "A100")
        assert len(prescriptions) == 1
        assert prescriptions[0].remarks == "second"

    async def test_keeps_existing_medicines(self, db, appointment):
        await prescription_service.save(
            db, "A100", "P001", "D001",
            remarks="draft",
            medicines=[{"name": "Paracetamol", "dosage": "500 mg", "instructions": "twice daily"}],
        )
        await lifecycle_service.complete(db, "A100", "final")

        [pres] = await _prescriptions_for(db, "A100")
        assert pres.remarks == "final"
        assert pres.medicines[0]["name"] == "Paracetamol"

    async def test_missing_summary_is_empty_string(self, db, appointment):
        appt = await lifecycle_service.complete(db, "A100", None)
        assert appt.summary == ""

    async def test_unknown_appointment(self, db):
        with pytest.raises(NotFoundError):
            await lifecycle_service.complete(db, "A-none", "x")
        assert await db.scalar(select(func.count(Prescription.id))) == 0

    async def test_cancelled_is_terminal(self, db, appointment):
        appointment.status = AppointmentStatus.CANCELLED.value
        await db.commit()
        with pytest.raises(ConflictError):
            await lifecycle_service.complete(db, "A100", "x")

    async def test_failed_prescription_write_rolls_back_completion(
        self, db, appointment, session_factory, failing_prescription_insert
    ):
        with pytest.raises(IntegrityError):
            await lifecycle_service.complete(db, "A100", "Rest and fluids.")
        await db.rollback()

        async with session_factory() as fresh:
            appt = await fresh.scalar(select(Appointment).where(Appointment.appointment_id == "A100"))
            assert appt.status == AppointmentStatus.UPCOMING.value
            assert appt.summary is None
            assert await _prescriptions_for(fresh, "A100") == []

    async def test_concurrent_completions_create_one_prescription(self, appointment, session_factory):
        async def finish(summary):
            async with session_factory() as session:
                await lifecycle_service.complete(session, "A100", summary)

        await asyncio.gather(finish("first"), finish("second"))

        async with session_factory() as session:
            prescriptions = await _prescriptions_for(session, "A100")
            appt = await session.scalar(select(Appointment).where(Appointment.appointment_id == "A100"))
        assert len(prescriptions) == 1
        assert prescriptions[0].remarks == appt.summary
        assert appt.status == AppointmentStatus.COMPLETED.value


class TestPrescriptionSave:
    async def test_upsert_only_overwrites_given_fields(self, db):
        await prescription_service.save(
            db, "A200", "P001", "D001", doctor_name="Dr. A", patient_name="John",
            remarks="take rest", medicines=[{"name": "Ibuprofen", "dosage": "400 mg", "instructions": ""}],
        )
        pres = await prescription_service.save(db, "A200", "P001", "D001", remarks="updated")

        assert pres.remarks == "updated"
        assert pres.doctor_name == "Dr. A"
        assert pres.medicines[0]["name"] == "Ibuprofen"
        assert len(await _prescriptions_for(db, "A200")) == 1

    async def test_requires_ids(self, db):
        with pytest.raises(ValidationError):
            await prescription_service.save(db, "A200", None, "D001")

    async def test_lookup_by_appointment_missing(self, db):
        with pytest.raises(NotFoundError):
            await prescription_service.by_appointment(db, "A-none")

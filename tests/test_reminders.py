"""
Tests for reminder window selection and notifier fan-out.
"""
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from ruralcare.exceptions import DependencyError
from ruralcare.models.appointment import Appointment, AppointmentStatus
from ruralcare.models.doctor import Doctor
from ruralcare.models.patient import Patient
from ruralcare.services.reminder_service import reminder_service, reminder_window

NOW = datetime(2025, 11, 3, 22, 30, tzinfo=timezone.utc)


class TestReminderWindow:
    def test_24h_is_today_and_tomorrow(self):
        assert reminder_window("24h", NOW) == ("2025-11-03", "2025-11-04")

    def test_7d_is_single_day_a_week_ahead(self):
        assert reminder_window("7d", NOW) == ("2025-11-10", "2025-11-10")

    def test_month_rollover(self):
        assert reminder_window("24h", datetime(2025, 12, 31, 9, 0)) == ("2025-12-31", "2026-01-01")

    def test_aware_datetimes_use_utc_day(self):
        local = datetime.fromisoformat("2025-11-04T01:00:00+05:30")
        assert reminder_window("24h", local) == ("2025-11-03", "2025-11-04")

    def test_unknown_mode_falls_back_to_24h(self):
        assert reminder_window("1h", NOW) == reminder_window("24h", NOW)


def _appt(appointment_id, date, status=AppointmentStatus.UPCOMING.value, patient_id="P001"):
    return Appointment(
        appointment_id=appointment_id,
        patient_id=patient_id,
        doctor_id="D001",
        doctor_name="Dr. Alan Brown",
        date=date,
        time="10:00",
        duration_minutes=30,
        status=status,
    )


@pytest.fixture
async def schedule(db):
    db.add_all([
        Patient(patient_id="P001", name="John Doe", email="john@example.com"),
        Doctor(doctor_id="D001", name="Dr. Alan Brown", username="alan"),
        _appt("A-yesterday", "2025-11-02"),
        _appt("A-today", "2025-11-03"),
        _appt("A-tomorrow", "2025-11-04"),
        _appt("A-done", "2025-11-04", status=AppointmentStatus.COMPLETED.value),
        _appt("A-later", "2025-11-05"),
        _appt("A-week", "2025-11-10"),
        _appt("A-orphan", "2025-11-04", patient_id="P404"),
    ])
    await db.commit()


@pytest.mark.asyncio
class TestSendUpcomingReminders:
    async def test_24h_selects_upcoming_today_and_tomorrow(self, db, schedule):
        due = await reminder_service.due_appointments(db, "24h", NOW)
        assert {a.appointment_id for a in due} == {"A-today", "A-tomorrow", "A-orphan"}

    async def test_7d_selects_exactly_one_week_ahead(self, db, schedule):
        due = await reminder_service.due_appointments(db, "7d", NOW)
        assert [a.appointment_id for a in due] == ["A-week"]

    async def test_skips_unresolvable_patient(self, db, schedule):
        notifier = AsyncMock()
        notifier.send_appointment_reminder.return_value = True

        count = await reminder_service.send_upcoming_reminders(db, notifier, "24h", NOW)

        assert count == 2
        sent_ids = {c.args[0].appointment_id for c in notifier.send_appointment_reminder.await_args_list}
        assert sent_ids == {"A-today", "A-tomorrow"}
        _, patient, doctor = notifier.send_appointment_reminder.await_args_list[0].args
        assert patient.patient_id == "P001"
        assert doctor.doctor_id == "D001"

    async def test_one_failure_does_not_abort_batch(self, db, schedule):
        notifier = AsyncMock()
        notifier.send_appointment_reminder.side_effect = [DependencyError("smtp down"), True]

        count = await reminder_service.send_upcoming_reminders(db, notifier, "24h", NOW)

        assert count == 1
        assert notifier.send_appointment_reminder.await_count == 2

    async def test_undelivered_are_not_counted(self, db, schedule):
        notifier = AsyncMock()
        notifier.send_appointment_reminder.return_value = False
        assert await reminder_service.send_upcoming_reminders(db, notifier, "24h", NOW) == 0

    async def test_nothing_due(self, db):
        notifier = AsyncMock()
        assert await reminder_service.send_upcoming_reminders(db, notifier, "7d", NOW) == 0
        notifier.send_appointment_reminder.assert_not_awaited()

"""Email service for sending appointment reminders over SMTP."""
import asyncio
import logging
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional
from ruralcare.config import get_settings
from ruralcare.exceptions import DependencyError

logger = logging.getLogger(__name__)

settings = get_settings()


class EmailService:
    """Sends reminders via an SMTP relay with STARTTLS."""

    def __init__(self):
        self.smtp_server = settings.smtp_host
        self.smtp_port = settings.smtp_port
        self.smtp_user = settings.smtp_user
        self.smtp_password = settings.smtp_password
        self.from_address = settings.from_email or settings.smtp_user

    def build_reminder(self, appointment, patient, doctor: Optional[object]) -> MIMEMultipart:
        doctor_name = getattr(doctor, "name", None) or appointment.doctor_name or "your doctor"

        message = MIMEMultipart("alternative")
        message["From"] = self.from_address
        message["To"] = patient.email
        message["Subject"] = f"Appointment reminder with {getattr(doctor, 'name', None) or 'your doctor'}"

        body = f"""
Dear {patient.name or "Patient"},

This is a reminder for your upcoming appointment:

  Date:   {appointment.date}
  Time:   {appointment.time}
  Doctor: {doctor_name}
  Reason: {appointment.reason_for_visit or "General checkup"}

If you need to reschedule, please log in to the Rural Health Care portal.

Regards,
Rural Health Care
        """.strip()

        message.attach(MIMEText(body, "plain"))
        return message

    def _deliver(self, message: MIMEMultipart) -> None:
        with smtplib.SMTP(self.smtp_server, self.smtp_port) as server:
            server.starttls()
            if self.smtp_user:
                server.login(self.smtp_user, self.smtp_password)
            server.send_message(message)

    async def send_appointment_reminder(self, appointment, patient, doctor) -> bool:
        """Email the patient about `appointment`.

        Returns False without sending when the patient has no address on file.
        SMTP failures are raised as DependencyError for the caller to handle.
        """
        if not patient.email:
            return False

        message = self.build_reminder(appointment, patient, doctor)
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            raise DependencyError(f"SMTP delivery to {patient.email} failed: {e}") from e

        logger.info("Reminder for %s sent to %s", appointment.appointment_id, patient.email)
        return True


email_service = EmailService()

from ruralcare.models.patient import Patient
from ruralcare.models.doctor import Doctor
from ruralcare.models.appointment import Appointment, AppointmentStatus
from ruralcare.models.prescription import Prescription, PatientHistoryEntry

__all__ = ["Patient", "Doctor", "Appointment", "AppointmentStatus", "Prescription",
           "PatientHistoryEntry"]

"""
Demo data bootstrap.

Loads fixtures/demo_seed.json (doctors D001-D005, patients P001-P004, a few
appointments and prescriptions, dashboard medication history) and inserts the
rows that are not there yet. Safe to run on every start.
"""

import json
import logging
import os
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from ruralcare.models.appointment import Appointment
from ruralcare.models.doctor import Doctor
from ruralcare.models.patient import Patient
from ruralcare.models.prescription import PatientHistoryEntry, Prescription

logger = logging.getLogger(__name__)

DEFAULT_FIXTURE = os.path.join(os.path.dirname(os.path.dirname(__file__)), "fixtures", "demo_seed.json")

# fixture section -> (model, natural key columns)
SECTIONS = [
    ("doctors", Doctor, ("doctor_id",)),
    ("patients", Patient, ("patient_id",)),
    ("appointments", Appointment, ("appointment_id",)),
    ("prescriptions", Prescription, ("appointment_id",)),
    ("history", PatientHistoryEntry, ("patient_id", "medicine", "date")),
]


def load_fixture(path: Optional[str] = None) -> dict:
    with open(path or DEFAULT_FIXTURE, encoding="utf-8") as f:
        return json.load(f)


async def seed_demo_data(db: AsyncSession, fixture: Optional[dict] = None) -> dict:
    """Insert missing fixture rows. Returns {section: rows inserted}."""
    fixture = fixture if fixture is not None else load_fixture()
    inserted = {}
    for section, model, key_columns in SECTIONS:
        count = 0
        for row in fixture.get(section, []):
            conditions = [getattr(model, col) == row.get(col) for col in key_columns]
            existing = await db.scalar(select(model.id).where(*conditions))
            if existing is None:
                db.add(model(**row))
                count += 1
        inserted[section] = count
    await db.commit()
    logger.info("Demo seed: %s", inserted)
    return inserted

"""
Identifier allocation.

Patients and doctors get short sequential ids (P001, D006, ...). Appointments
and uploaded scans get time-based tokens (A-<millis>, UP-<millis>).
"""

import logging
import threading
import time
from typing import Callable, Optional
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from ruralcare.exceptions import ConflictError, DependencyError
from ruralcare.services.locks import KeyedLocks

logger = logging.getLogger(__name__)

ID_WIDTH = 3
PATIENT_PREFIX, PATIENT_FLOOR = "P", 1
# D001-D005 are reserved for the seeded demo doctors
DOCTOR_PREFIX, DOCTOR_FLOOR = "D", 6
MAX_ALLOCATION_ATTEMPTS = 5

_allocation_locks = KeyedLocks()


def _suffix_number(identifier: Optional[str], prefix: str) -> Optional[int]:
    if not identifier or not identifier.startswith(prefix):
        return None
    suffix = identifier[len(prefix):]
    if not suffix.isdigit():
        return None
    return int(suffix)


def format_identifier(prefix: str, number: int, width: int = ID_WIDTH) -> str:
    return prefix + str(number).zfill(width)


def next_identifier(current_max: Optional[str], prefix: str, floor: int, width: int = ID_WIDTH) -> str:
    """Id following `current_max`, or the floor id if there is no usable maximum.

    >>> next_identifier("P002", "P", 1)
    'P003'
    >>> next_identifier("D005", "D", 6)
    'D006'
    """
    number = _suffix_number(current_max, prefix)
    if number is None or number + 1 < floor:
        return format_identifier(prefix, floor, width)
    return format_identifier(prefix, number + 1, width)


async def current_max_identifier(db: AsyncSession, column, prefix: str) -> Optional[str]:
    """Highest existing id by numeric suffix, so P1000 sorts above P999."""
    result = await db.execute(select(column).where(column.like(f"{prefix}%")))
    best, best_number = None, -1
    for identifier in result.scalars().all():
        number = _suffix_number(identifier, prefix)
        if number is not None and number > best_number:
            best, best_number = identifier, number
    return best


async def insert_with_next_identifier(
    db: AsyncSession,
    column,
    prefix: str,
    floor: int,
    build: Callable[[str], object],
):
    """Insert the record returned by `build(next_id)` and commit it.

    Allocation is serialized per prefix in-process; the unique index on the id
    column catches writers outside this process, in which case the max is
    re-read and the next id tried.
    """
    async with _allocation_locks.hold(prefix):
        for attempt in range(1, MAX_ALLOCATION_ATTEMPTS + 1):
            candidate = next_identifier(await current_max_identifier(db, column, prefix), prefix, floor)
            record = build(candidate)
            db.add(record)
            try:
                await db.commit()
            except IntegrityError:
                await db.rollback()
                taken = await db.scalar(select(column).where(column == candidate))
                if taken is None:
                    # Some other unique column collided
                    raise ConflictError("A record with these details already exists")
                logger.warning("Identifier %s taken concurrently (attempt %d)", candidate, attempt)
                continue
            await db.refresh(record)
            return record
    raise DependencyError(f"Could not allocate a {prefix} identifier")


class TimeTokenFactory:
    """Millisecond tokens, strictly increasing within the process."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next(self, prefix: str) -> str:
        with self._lock:
            millis = int(self._clock() * 1000)
            if millis <= self._last:
                millis = self._last + 1
            self._last = millis
        return f"{prefix}{millis}"


time_tokens = TimeTokenFactory()

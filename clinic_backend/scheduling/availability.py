"""Availability calculation for a doctor's day."""

from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Optional

from sqlalchemy.orm import Session

from clinic_backend.scheduling.repository import SchedulingRepository
from clinic_backend.scheduling.slots import label_for, slot_start_label, sort_slot_labels


class SlotCheck(str, Enum):
    AVAILABLE = 'available'
    UNAVAILABLE = 'unavailable'
    DOCTOR_NOT_FOUND = 'doctor_not_found'


def day_window(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def get_booked_labels(
    doctor_id: int,
    day: date,
    db: Session,
    exclude_appointment_id: Optional[int] = None,
) -> set[str]:
    start, end = day_window(day)
    appointments = SchedulingRepository.by_doctor_and_window(db, doctor_id, start, end)
    return {
        label_for(appointment.appointment_time)
        for appointment in appointments
        if appointment.id != exclude_appointment_id
    }


def get_doctor_availability(
    doctor_id: int,
    day: date,
    db: Session,
    exclude_appointment_id: Optional[int] = None,
) -> list[str]:
    """Configured slot labels of a doctor that are still free on ``day``.

    Returns an empty list for an unknown doctor. Labels are compared by their
    start time and returned as configured, sorted by start time.
    """
    doctor = SchedulingRepository.get_doctor(db, doctor_id)
    if doctor is None:
        return []

    booked_labels = get_booked_labels(doctor_id, day, db, exclude_appointment_id)
    free_labels = [
        label
        for label in set(doctor.available_times or [])
        if slot_start_label(label) not in booked_labels
    ]
    return sort_slot_labels(free_labels)


def check_appointment_time(
    doctor_id: int,
    appointment_time: datetime,
    db: Session,
    exclude_appointment_id: Optional[int] = None,
) -> SlotCheck:
    if SchedulingRepository.get_doctor(db, doctor_id) is None:
        return SlotCheck.DOCTOR_NOT_FOUND

    requested_label = label_for(appointment_time)
    free_starts = {
        slot_start_label(label)
        for label in get_doctor_availability(
            doctor_id, appointment_time.date(), db, exclude_appointment_id=exclude_appointment_id
        )
    }
    if requested_label in free_starts:
        return SlotCheck.AVAILABLE
    return SlotCheck.UNAVAILABLE

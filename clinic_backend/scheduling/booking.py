"""Booking of new appointments."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_backend.models.appointment import Appointment
from clinic_backend.scheduling.repository import SchedulingRepository
from clinic_backend.scheduling.status import AppointmentStatus
from clinic_backend.schemas.appointment import AppointmentIn

logger = logging.getLogger(__name__)


class BookingOutcome(str, Enum):
    CREATED = 'created'
    DOCTOR_NOT_FOUND = 'doctor_not_found'
    PATIENT_NOT_FOUND = 'patient_not_found'
    SLOT_TAKEN = 'slot_taken'
    INTERNAL_ERROR = 'internal_error'


@dataclass
class BookingResult:
    outcome: BookingOutcome
    appointment: Optional[Appointment] = None


def book_appointment(data: AppointmentIn, db: Session) -> BookingResult:
    """Book ``data`` as a new scheduled appointment.

    Checks run in order and the first failure wins: patient, doctor, then the
    doctor's slot at the exact requested instant. The unique index on
    (doctor_id, appointment_time) rejects a concurrent booking that passed the
    same check, and that rejection is reported as a taken slot.
    """
    doctor_id = data.doctor.id
    patient_id = data.patient.id

    try:
        if SchedulingRepository.get_patient(db, patient_id) is None:
            return BookingResult(BookingOutcome.PATIENT_NOT_FOUND)

        if SchedulingRepository.get_doctor(db, doctor_id) is None:
            return BookingResult(BookingOutcome.DOCTOR_NOT_FOUND)

        if SchedulingRepository.exists_conflict(db, doctor_id, data.appointment_time):
            logger.info('Doctor %s already booked at %s', doctor_id, data.appointment_time)
            return BookingResult(BookingOutcome.SLOT_TAKEN)

        appointment = Appointment(
            doctor_id=doctor_id,
            patient_id=patient_id,
            appointment_time=data.appointment_time,
            status=int(AppointmentStatus.SCHEDULED),
            reason=data.reason,
        )
        SchedulingRepository.save(db, appointment)
        db.commit()
        db.refresh(appointment)
    except IntegrityError:
        db.rollback()
        logger.warning('Concurrent booking won doctor %s at %s', doctor_id, data.appointment_time)
        return BookingResult(BookingOutcome.SLOT_TAKEN)
    except SQLAlchemyError:
        db.rollback()
        logger.exception('Failed to book appointment for doctor %s at %s', doctor_id, data.appointment_time)
        return BookingResult(BookingOutcome.INTERNAL_ERROR)

    logger.info('Booked appointment %s for patient %s with doctor %s', appointment.id, patient_id, doctor_id)
    return BookingResult(BookingOutcome.CREATED, appointment)

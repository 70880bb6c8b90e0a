"""Rescheduling and cancellation of existing appointments."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_backend.models.appointment import Appointment
from clinic_backend.scheduling.repository import SchedulingRepository
from clinic_backend.scheduling.status import AppointmentStatus, apply_status, is_allowed_transition
from clinic_backend.schemas.appointment import AppointmentIn

logger = logging.getLogger(__name__)


class UpdateOutcome(str, Enum):
    UPDATED = 'updated'
    NOT_FOUND = 'not_found'
    PATIENT_MISMATCH = 'patient_mismatch'
    SLOT_TAKEN = 'slot_taken'
    INVALID_STATUS = 'invalid_status'
    INTERNAL_ERROR = 'internal_error'


class CancelOutcome(str, Enum):
    CANCELLED = 'cancelled'
    NOT_FOUND = 'not_found'
    UNAUTHORIZED = 'unauthorized'
    INTERNAL_ERROR = 'internal_error'


@dataclass
class UpdateResult:
    outcome: UpdateOutcome
    appointment: Optional[Appointment] = None


def update_appointment(data: AppointmentIn, db: Session) -> UpdateResult:
    """Overwrite time, status and reason of an existing appointment.

    The doctor and patient of an appointment never change. A payload naming a
    different patient than the stored one is refused whatever else it asks for.
    A completed appointment cannot be moved back to scheduled.
    """
    if data.id is None:
        return UpdateResult(UpdateOutcome.NOT_FOUND)

    try:
        existing = SchedulingRepository.get_appointment(db, data.id)
        if existing is None:
            return UpdateResult(UpdateOutcome.NOT_FOUND)

        if existing.patient_id != data.patient.id:
            logger.warning(
                'Appointment %s belongs to patient %s, refused update for patient %s',
                existing.id, existing.patient_id, data.patient.id,
            )
            return UpdateResult(UpdateOutcome.PATIENT_MISMATCH)

        if SchedulingRepository.exists_conflict(
            db,
            existing.doctor_id,
            data.appointment_time,
            exclude_appointment_id=existing.id,
        ):
            logger.info('Doctor %s already booked at %s', existing.doctor_id, data.appointment_time)
            return UpdateResult(UpdateOutcome.SLOT_TAKEN)

        if not is_allowed_transition(AppointmentStatus(existing.status), data.status):
            logger.warning(
                'Refused status change of appointment %s from %s to %s',
                existing.id, AppointmentStatus(existing.status).name, data.status.name,
            )
            return UpdateResult(UpdateOutcome.INVALID_STATUS)

        existing.appointment_time = data.appointment_time
        existing.reason = data.reason
        apply_status(existing, data.status)
        SchedulingRepository.save(db, existing)
        db.commit()
        db.refresh(existing)
    except IntegrityError:
        db.rollback()
        logger.warning('Concurrent booking won the slot requested for appointment %s', data.id)
        return UpdateResult(UpdateOutcome.SLOT_TAKEN)
    except SQLAlchemyError:
        db.rollback()
        logger.exception('Failed to update appointment %s', data.id)
        return UpdateResult(UpdateOutcome.INTERNAL_ERROR)

    logger.info('Updated appointment %s', existing.id)
    return UpdateResult(UpdateOutcome.UPDATED, existing)


def cancel_appointment(appointment_id: int, caller_patient_id: int, db: Session) -> CancelOutcome:
    """Hard-delete an appointment owned by ``caller_patient_id``"""
    try:
        existing = SchedulingRepository.get_appointment(db, appointment_id)
        if existing is None:
            return CancelOutcome.NOT_FOUND

        if existing.patient_id != caller_patient_id:
            logger.warning(
                'Patient %s tried to cancel appointment %s owned by patient %s',
                caller_patient_id, appointment_id, existing.patient_id,
            )
            return CancelOutcome.UNAUTHORIZED

        SchedulingRepository.delete(db, existing)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception('Failed to cancel appointment %s', appointment_id)
        return CancelOutcome.INTERNAL_ERROR

    logger.info('Cancelled appointment %s', appointment_id)
    return CancelOutcome.CANCELLED

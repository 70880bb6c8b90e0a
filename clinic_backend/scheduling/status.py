"""Appointment status lifecycle."""

import logging
from enum import IntEnum

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_backend.scheduling.repository import SchedulingRepository

logger = logging.getLogger(__name__)


class AppointmentStatus(IntEnum):
    SCHEDULED = 0
    COMPLETED = 1


ALLOWED_TRANSITIONS = {
    AppointmentStatus.SCHEDULED: {AppointmentStatus.SCHEDULED, AppointmentStatus.COMPLETED},
    AppointmentStatus.COMPLETED: {AppointmentStatus.COMPLETED},
}


class StatusTransitionError(ValueError):
    def __init__(self, current: AppointmentStatus, target: AppointmentStatus):
        super().__init__(f'Cannot move an appointment from {current.name} to {target.name}.')
        self.current = current
        self.target = target


def is_allowed_transition(current: AppointmentStatus, target: AppointmentStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def apply_status(appointment, status: AppointmentStatus) -> None:
    """Change the status of a loaded appointment without committing"""
    current = AppointmentStatus(appointment.status)
    target = AppointmentStatus(status)
    if not is_allowed_transition(current, target):
        raise StatusTransitionError(current, target)
    appointment.status = int(target)


def set_status(appointment_id: int, status: AppointmentStatus, db: Session) -> None:
    """Move an appointment to ``status``.

    A missing appointment is ignored: the caller may be racing a cancellation,
    and the status change has nothing left to apply to. Marking a completed
    appointment completed again is allowed; going back to scheduled is not.
    """
    target = AppointmentStatus(status)
    appointment = SchedulingRepository.get_appointment(db, appointment_id)
    if appointment is None:
        logger.info('Status change to %s ignored, appointment %s no longer exists', target.name, appointment_id)
        return

    apply_status(appointment, target)

    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception('Failed to set status of appointment %s', appointment_id)
        raise

"""Doctor removal with cascading appointment cleanup."""

import logging
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_backend.scheduling.repository import SchedulingRepository

logger = logging.getLogger(__name__)


class DoctorRemovalOutcome(str, Enum):
    DELETED = 'deleted'
    NOT_FOUND = 'not_found'
    INTERNAL_ERROR = 'internal_error'


def remove_doctor(doctor_id: int, db: Session) -> DoctorRemovalOutcome:
    try:
        doctor = SchedulingRepository.get_doctor(db, doctor_id)
        if doctor is None:
            return DoctorRemovalOutcome.NOT_FOUND

        removed = SchedulingRepository.delete_all_by_doctor(db, doctor_id)
        SchedulingRepository.delete(db, doctor)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception('Failed to remove doctor %s', doctor_id)
        return DoctorRemovalOutcome.INTERNAL_ERROR

    logger.info('Removed doctor %s and %s appointment(s)', doctor_id, removed)
    return DoctorRemovalOutcome.DELETED

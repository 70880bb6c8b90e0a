"""Prescription recording, which completes the appointment it belongs to."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_backend.models.prescription import Prescription
from clinic_backend.scheduling.repository import SchedulingRepository
from clinic_backend.scheduling.status import AppointmentStatus, apply_status
from clinic_backend.schemas.prescription import PrescriptionIn

logger = logging.getLogger(__name__)


class PrescriptionOutcome(str, Enum):
    RECORDED = 'recorded'
    FOUND = 'found'
    APPOINTMENT_NOT_FOUND = 'appointment_not_found'
    PRESCRIPTION_NOT_FOUND = 'prescription_not_found'
    UNAUTHORIZED = 'unauthorized'
    INTERNAL_ERROR = 'internal_error'


@dataclass
class PrescriptionResult:
    outcome: PrescriptionOutcome
    prescription: Optional[Prescription] = None


def record_prescription(data: PrescriptionIn, doctor_id: int, db: Session) -> PrescriptionResult:
    """Store a prescription and mark its appointment completed in one commit.

    Only the doctor the appointment is booked with may write it.
    """
    try:
        appointment = SchedulingRepository.get_appointment(db, data.appointment_id)
        if appointment is None:
            return PrescriptionResult(PrescriptionOutcome.APPOINTMENT_NOT_FOUND)

        if appointment.doctor_id != doctor_id:
            logger.warning(
                'Doctor %s tried to prescribe for appointment %s of doctor %s',
                doctor_id, appointment.id, appointment.doctor_id,
            )
            return PrescriptionResult(PrescriptionOutcome.UNAUTHORIZED)

        prescription = Prescription(
            appointment_id=data.appointment_id,
            patient_name=data.patient_name,
            medication=data.medication,
            dosage=data.dosage,
            doctor_notes=data.doctor_notes,
        )
        SchedulingRepository.save(db, prescription)
        apply_status(appointment, AppointmentStatus.COMPLETED)
        db.commit()
        db.refresh(prescription)
    except SQLAlchemyError:
        db.rollback()
        logger.exception('Failed to record prescription for appointment %s', data.appointment_id)
        return PrescriptionResult(PrescriptionOutcome.INTERNAL_ERROR)

    logger.info('Recorded prescription %s for appointment %s', prescription.id, data.appointment_id)
    return PrescriptionResult(PrescriptionOutcome.RECORDED, prescription)


def get_prescription(appointment_id: int, doctor_id: int, db: Session) -> PrescriptionResult:
    """Latest prescription written for an appointment of ``doctor_id``"""
    appointment = SchedulingRepository.get_appointment(db, appointment_id)
    if appointment is None:
        return PrescriptionResult(PrescriptionOutcome.APPOINTMENT_NOT_FOUND)
    if appointment.doctor_id != doctor_id:
        return PrescriptionResult(PrescriptionOutcome.UNAUTHORIZED)

    prescription = SchedulingRepository.get_prescription_by_appointment(db, appointment_id)
    if prescription is None:
        return PrescriptionResult(PrescriptionOutcome.PRESCRIPTION_NOT_FOUND)
    return PrescriptionResult(PrescriptionOutcome.FOUND, prescription)

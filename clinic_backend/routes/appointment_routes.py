from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_backend.auth.dependencies import require_doctor, require_patient
from clinic_backend.auth.identity import Principal
from clinic_backend.database import get_db
from clinic_backend.routes import common
from clinic_backend.scheduling.availability import SlotCheck, check_appointment_time
from clinic_backend.scheduling.booking import BookingOutcome, book_appointment
from clinic_backend.scheduling.mutation import (
    CancelOutcome,
    UpdateOutcome,
    cancel_appointment,
    update_appointment,
)
from clinic_backend.scheduling.queries import (
    PatientAppointmentQuery,
    get_appointments_for_doctor,
    get_appointments_for_patient,
)
from clinic_backend.scheduling.repository import SchedulingRepository
from clinic_backend.schemas.appointment import AppointmentIn, AppointmentResponse

router = APIRouter(tags=['appointments'])

BOOKING_ERRORS = {
    BookingOutcome.PATIENT_NOT_FOUND: (status.HTTP_404_NOT_FOUND, 'Patient not found.'),
    BookingOutcome.DOCTOR_NOT_FOUND: (status.HTTP_404_NOT_FOUND, 'Doctor not found.'),
    BookingOutcome.SLOT_TAKEN: (status.HTTP_409_CONFLICT, 'This time is already booked.'),
    BookingOutcome.INTERNAL_ERROR: (status.HTTP_503_SERVICE_UNAVAILABLE, common.DATABASE_UNAVAILABLE_DETAIL),
}

UPDATE_ERRORS = {
    UpdateOutcome.NOT_FOUND: (status.HTTP_404_NOT_FOUND, 'Appointment not found.'),
    UpdateOutcome.PATIENT_MISMATCH: (status.HTTP_403_FORBIDDEN, 'Patient ID mismatch.'),
    UpdateOutcome.SLOT_TAKEN: (status.HTTP_409_CONFLICT, 'Time slot already booked for this doctor.'),
    UpdateOutcome.INVALID_STATUS: (
        status.HTTP_409_CONFLICT,
        'A completed appointment cannot be moved back to scheduled.',
    ),
    UpdateOutcome.INTERNAL_ERROR: (status.HTTP_503_SERVICE_UNAVAILABLE, common.DATABASE_UNAVAILABLE_DETAIL),
}

CANCEL_ERRORS = {
    CancelOutcome.NOT_FOUND: (status.HTTP_404_NOT_FOUND, 'Appointment not found.'),
    CancelOutcome.UNAUTHORIZED: (
        status.HTTP_403_FORBIDDEN,
        'Only the patient who booked this appointment can cancel it.',
    ),
    CancelOutcome.INTERNAL_ERROR: (status.HTTP_503_SERVICE_UNAVAILABLE, common.DATABASE_UNAVAILABLE_DETAIL),
}


def raise_for_outcome(outcome, errors: dict) -> None:
    if outcome in errors:
        status_code, detail = errors[outcome]
        raise HTTPException(status_code=status_code, detail=detail)


@router.get('/patient', response_model=list[AppointmentResponse])
def list_my_appointments(
    condition: str | None = Query(default=None),
    doctor_name: str | None = Query(default=None),
    principal: Principal = Depends(require_patient),
    db: Session = Depends(get_db),
):
    try:
        query = PatientAppointmentQuery(condition=condition, doctor_name=doctor_name)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Condition must be past or future.',
        ) from exc

    common.ensure_database_ready()

    try:
        return get_appointments_for_patient(principal.id, query, db)
    except SQLAlchemyError as exc:
        raise common.database_unavailable() from exc


@router.get('/{appointment_date}', response_model=list[AppointmentResponse])
def list_doctor_appointments(
    appointment_date: date,
    patient_name: str | None = Query(default=None),
    principal: Principal = Depends(require_doctor),
    db: Session = Depends(get_db),
):
    common.ensure_database_ready()

    try:
        return get_appointments_for_doctor(principal.id, appointment_date, db, patient_name=patient_name)
    except SQLAlchemyError as exc:
        raise common.database_unavailable() from exc


@router.post('', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: AppointmentIn,
    principal: Principal = Depends(require_patient),
    db: Session = Depends(get_db),
):
    if data.patient.id != principal.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail='Patients can only book appointments for themselves.',
        )

    common.ensure_database_ready()

    try:
        slot_check = check_appointment_time(data.doctor.id, data.appointment_time, db)
    except SQLAlchemyError as exc:
        raise common.database_unavailable() from exc

    if slot_check is SlotCheck.DOCTOR_NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Doctor not found.')
    if slot_check is SlotCheck.UNAVAILABLE:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail='Appointment slot not available.')

    result = book_appointment(data, db)
    raise_for_outcome(result.outcome, BOOKING_ERRORS)
    return result.appointment


@router.put('', response_model=AppointmentResponse)
def change_appointment(
    data: AppointmentIn,
    principal: Principal = Depends(require_patient),
    db: Session = Depends(get_db),
):
    if data.patient.id != principal.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Patient ID mismatch.')

    common.ensure_database_ready()

    if data.id is not None:
        try:
            existing = SchedulingRepository.get_appointment(db, data.id)
            slot_check = None
            if existing is not None and existing.patient_id == data.patient.id:
                slot_check = check_appointment_time(
                    existing.doctor_id,
                    data.appointment_time,
                    db,
                    exclude_appointment_id=existing.id,
                )
        except SQLAlchemyError as exc:
            raise common.database_unavailable() from exc

        if slot_check is SlotCheck.UNAVAILABLE:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail='Appointment slot not available.')

    result = update_appointment(data, db)
    raise_for_outcome(result.outcome, UPDATE_ERRORS)
    return result.appointment


@router.delete('/{appointment_id}', status_code=status.HTTP_204_NO_CONTENT)
def cancel_my_appointment(
    appointment_id: int,
    principal: Principal = Depends(require_patient),
    db: Session = Depends(get_db),
):
    common.ensure_database_ready()

    outcome = cancel_appointment(appointment_id, principal.id, db)
    raise_for_outcome(outcome, CANCEL_ERRORS)

"""Read-side queries: a doctor's day, a patient's history and doctor search."""

from datetime import date, time
from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from clinic_backend.models.appointment import Appointment
from clinic_backend.models.doctor import Doctor
from clinic_backend.scheduling.availability import day_window
from clinic_backend.scheduling.repository import SchedulingRepository
from clinic_backend.scheduling.slots import parse_slot_start
from clinic_backend.scheduling.status import AppointmentStatus

NO_FILTER_VALUES = {'', '-'}
NOON = time(12, 0)


class DayPeriod(str, Enum):
    AM = 'AM'
    PM = 'PM'


class AppointmentCondition(str, Enum):
    PAST = 'past'
    FUTURE = 'future'


CONDITION_STATUS = {
    AppointmentCondition.PAST: AppointmentStatus.COMPLETED,
    AppointmentCondition.FUTURE: AppointmentStatus.SCHEDULED,
}


def normalize_filter_text(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip()
    if normalized in NO_FILTER_VALUES:
        return None
    return normalized


class DoctorQuery(BaseModel):
    """Optional criteria for doctor search. Unset fields do not filter."""

    name: Optional[str] = None
    specialty: Optional[str] = None
    period: Optional[DayPeriod] = None

    @field_validator('name', 'specialty', mode='before')
    @classmethod
    def normalize_text(cls, value: str | None) -> str | None:
        return normalize_filter_text(value)

    @field_validator('period', mode='before')
    @classmethod
    def normalize_period(cls, value):
        if value is None or isinstance(value, DayPeriod):
            return value
        normalized = str(value).strip().lower()
        if normalized in NO_FILTER_VALUES:
            return None
        if 'am' in normalized:
            return DayPeriod.AM
        if 'pm' in normalized:
            return DayPeriod.PM
        raise ValueError('Period must be AM or PM.')


class PatientAppointmentQuery(BaseModel):
    """Filters for a patient's own appointments.

    ``condition`` selects completed (past) or scheduled (future) visits and
    ``doctor_name`` keeps doctors whose name contains it, ignoring case.
    """

    condition: Optional[AppointmentCondition] = None
    doctor_name: Optional[str] = None

    @field_validator('doctor_name', mode='before')
    @classmethod
    def normalize_doctor_name(cls, value: str | None) -> str | None:
        return normalize_filter_text(value)

    @field_validator('condition', mode='before')
    @classmethod
    def normalize_condition(cls, value):
        if value is None or isinstance(value, AppointmentCondition):
            return value
        normalized = str(value).strip().lower()
        if normalized in NO_FILTER_VALUES:
            return None
        try:
            return AppointmentCondition(normalized)
        except ValueError:
            raise ValueError('Condition must be past or future.') from None


def slot_in_period(label: str, period: DayPeriod) -> bool:
    start = parse_slot_start(label)
    if start is None:
        return False
    if period is DayPeriod.AM:
        return start < NOON
    return start >= NOON


def has_slot_in_period(doctor: Doctor, period: DayPeriod) -> bool:
    return any(slot_in_period(label, period) for label in doctor.available_times or [])


def find_doctors(query: DoctorQuery, db: Session) -> list[Doctor]:
    doctors = SchedulingRepository.find_doctors(db, name=query.name, specialty=query.specialty)
    if query.period is None:
        return doctors
    return [doctor for doctor in doctors if has_slot_in_period(doctor, query.period)]


def get_appointments_for_doctor(
    doctor_id: int,
    day: date,
    db: Session,
    patient_name: Optional[str] = None,
) -> list[Appointment]:
    """Appointments of a doctor on ``day``, earliest first.

    ``patient_name`` narrows the result to patients whose name contains it,
    ignoring case.
    """
    start, end = day_window(day)
    name_filter = patient_name.strip() if patient_name else None
    return SchedulingRepository.by_doctor_and_window(db, doctor_id, start, end, patient_name=name_filter or None)


def get_appointments_for_patient(
    patient_id: int,
    query: PatientAppointmentQuery,
    db: Session,
) -> list[Appointment]:
    status = CONDITION_STATUS[query.condition] if query.condition is not None else None
    return SchedulingRepository.by_patient(db, patient_id, status=status, doctor_name=query.doctor_name)

"""Scheduling repository - record store operations for the scheduling engine.

Methods never commit. The engine that calls them owns the transaction, so a
conflict check and the write that depends on it land in the same unit of work.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from clinic_backend.models.appointment import Appointment
from clinic_backend.models.doctor import Doctor
from clinic_backend.models.patient import Patient
from clinic_backend.models.prescription import Prescription


class SchedulingRepository:
    """Repository for doctor, patient and appointment lookups"""

    @staticmethod
    def get_doctor(db: Session, doctor_id: int) -> Optional[Doctor]:
        return db.get(Doctor, doctor_id)

    @staticmethod
    def get_patient(db: Session, patient_id: int) -> Optional[Patient]:
        return db.get(Patient, patient_id)

    @staticmethod
    def get_appointment(db: Session, appointment_id: int) -> Optional[Appointment]:
        return db.get(Appointment, appointment_id)

    @staticmethod
    def exists_conflict(
        db: Session,
        doctor_id: int,
        instant: datetime,
        exclude_appointment_id: Optional[int] = None,
    ) -> bool:
        """Whether another appointment already holds this doctor at this instant"""
        query = db.query(Appointment.id).filter(
            Appointment.doctor_id == doctor_id,
            Appointment.appointment_time == instant,
        )
        if exclude_appointment_id is not None:
            query = query.filter(Appointment.id != exclude_appointment_id)
        return db.query(query.exists()).scalar()

    @staticmethod
    def by_doctor_and_window(
        db: Session,
        doctor_id: int,
        start: datetime,
        end: datetime,
        patient_name: Optional[str] = None,
    ) -> list[Appointment]:
        """Appointments of a doctor with start <= appointment_time < end"""
        query = db.query(Appointment).filter(
            Appointment.doctor_id == doctor_id,
            Appointment.appointment_time >= start,
            Appointment.appointment_time < end,
        )
        if patient_name:
            query = query.join(Patient, Appointment.patient_id == Patient.id).filter(
                func.lower(Patient.name).contains(patient_name.lower(), autoescape=True)
            )
        return query.order_by(Appointment.appointment_time.asc(), Appointment.id.asc()).all()

    @staticmethod
    def by_patient(
        db: Session,
        patient_id: int,
        status: Optional[int] = None,
        doctor_name: Optional[str] = None,
    ) -> list[Appointment]:
        query = db.query(Appointment).filter(Appointment.patient_id == patient_id)
        if status is not None:
            query = query.filter(Appointment.status == status)
        if doctor_name:
            query = query.join(Doctor, Appointment.doctor_id == Doctor.id).filter(
                func.lower(Doctor.name).contains(doctor_name.lower(), autoescape=True)
            )
        return query.order_by(Appointment.appointment_time.asc(), Appointment.id.asc()).all()

    @staticmethod
    def find_doctors(
        db: Session,
        name: Optional[str] = None,
        specialty: Optional[str] = None,
    ) -> list[Doctor]:
        query = db.query(Doctor)
        if name:
            query = query.filter(func.lower(Doctor.name).contains(name.lower(), autoescape=True))
        if specialty:
            query = query.filter(func.lower(Doctor.specialty) == specialty.lower())
        return query.order_by(Doctor.name.asc(), Doctor.id.asc()).all()

    @staticmethod
    def get_prescription_by_appointment(db: Session, appointment_id: int) -> Optional[Prescription]:
        return (
            db.query(Prescription)
            .filter(Prescription.appointment_id == appointment_id)
            .order_by(Prescription.id.desc())
            .first()
        )

    @staticmethod
    def save(db: Session, record) -> None:
        db.add(record)
        db.flush()

    @staticmethod
    def delete(db: Session, record) -> None:
        db.delete(record)
        db.flush()

    @staticmethod
    def delete_all_by_doctor(db: Session, doctor_id: int) -> int:
        """Delete every appointment of a doctor, returning the count removed"""
        return (
            db.query(Appointment)
            .filter(Appointment.doctor_id == doctor_id)
            .delete(synchronize_session="fetch")
        )

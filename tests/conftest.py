import os
from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from clinic_backend.database import Base  # noqa: E402
from clinic_backend.models.appointment import Appointment  # noqa: E402
from clinic_backend.models.doctor import Doctor  # noqa: E402
from clinic_backend.models.patient import Patient  # noqa: E402
from clinic_backend.models.prescription import Prescription  # noqa: E402


@pytest.fixture
def scheduling_db():
    engine = create_engine('sqlite:///:memory:')
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    tables = [Doctor.__table__, Patient.__table__, Appointment.__table__, Prescription.__table__]
    Base.metadata.create_all(bind=engine, tables=tables)

    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine, tables=list(reversed(tables)))


@pytest.fixture
def make_doctor(scheduling_db):
    def _make_doctor(
        name: str = 'Dr. Gregory House',
        specialty: str = 'Diagnostics',
        available_times: list[str] | None = None,
        email: str | None = None,
    ) -> Doctor:
        doctor = Doctor(
            name=name,
            specialty=specialty,
            email=email or f'{name.split()[-1].lower()}@clinic.example',
            phone='5550001111',
            available_times=available_times if available_times is not None else ['09:00', '10:00', '11:00'],
        )
        scheduling_db.add(doctor)
        scheduling_db.commit()
        scheduling_db.refresh(doctor)
        return doctor

    return _make_doctor


@pytest.fixture
def make_patient(scheduling_db):
    def _make_patient(name: str = 'Alice Walker', email: str | None = None) -> Patient:
        patient = Patient(
            name=name,
            email=email or f'{name.split()[0].lower()}@example.com',
            phone='5552223333',
            address='1 Main St',
        )
        scheduling_db.add(patient)
        scheduling_db.commit()
        scheduling_db.refresh(patient)
        return patient

    return _make_patient


@pytest.fixture
def make_appointment(scheduling_db):
    def _make_appointment(
        doctor: Doctor,
        patient: Patient,
        appointment_time: datetime,
        status: int = 0,
        reason: str | None = 'Checkup',
    ) -> Appointment:
        appointment = Appointment(
            doctor_id=doctor.id,
            patient_id=patient.id,
            appointment_time=appointment_time,
            status=status,
            reason=reason,
        )
        scheduling_db.add(appointment)
        scheduling_db.commit()
        scheduling_db.refresh(appointment)
        return appointment

    return _make_appointment

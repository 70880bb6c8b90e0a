from datetime import datetime

from clinic_backend.models.appointment import Appointment
from clinic_backend.models.doctor import Doctor
from clinic_backend.scheduling.doctors import DoctorRemovalOutcome, remove_doctor


def test_remove_unknown_doctor_is_not_found(scheduling_db) -> None:
    assert remove_doctor(999, scheduling_db) is DoctorRemovalOutcome.NOT_FOUND


def test_remove_doctor_cascades_to_its_appointments_only(
    scheduling_db, make_doctor, make_patient, make_appointment
) -> None:
    house = make_doctor()
    wilson = make_doctor(name='Dr. James Wilson', specialty='Oncology')
    patient = make_patient()
    make_appointment(house, patient, datetime(2024, 5, 1, 9, 0))
    make_appointment(house, patient, datetime(2024, 5, 1, 10, 0))
    kept = make_appointment(wilson, patient, datetime(2024, 5, 1, 9, 0))
    house_id = house.id

    assert remove_doctor(house_id, scheduling_db) is DoctorRemovalOutcome.DELETED

    assert scheduling_db.get(Doctor, house_id) is None
    assert [appointment.id for appointment in scheduling_db.query(Appointment).all()] == [kept.id]

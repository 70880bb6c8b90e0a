from datetime import date, datetime

import pytest
from pydantic import ValidationError

from clinic_backend.scheduling.queries import (
    AppointmentCondition,
    DayPeriod,
    DoctorQuery,
    PatientAppointmentQuery,
    find_doctors,
    get_appointments_for_doctor,
    get_appointments_for_patient,
)
from clinic_backend.scheduling.status import AppointmentStatus


def test_appointments_for_doctor_are_sorted_and_bounded_to_the_day(
    scheduling_db, make_doctor, make_patient, make_appointment
) -> None:
    doctor = make_doctor()
    patient = make_patient()
    late = make_appointment(doctor, patient, datetime(2024, 5, 1, 11, 0))
    early = make_appointment(doctor, patient, datetime(2024, 5, 1, 0, 0))
    make_appointment(doctor, patient, datetime(2024, 5, 2, 0, 0))

    appointments = get_appointments_for_doctor(doctor.id, date(2024, 5, 1), scheduling_db)

    assert [appointment.id for appointment in appointments] == [early.id, late.id]


def test_appointments_for_doctor_filters_patient_name_case_insensitively(
    scheduling_db, make_doctor, make_patient, make_appointment
) -> None:
    doctor = make_doctor()
    alice = make_patient(name='Alice Walker')
    bob = make_patient(name='Bob Marley')
    alice_visit = make_appointment(doctor, alice, datetime(2024, 5, 1, 9, 0))
    make_appointment(doctor, bob, datetime(2024, 5, 1, 10, 0))

    appointments = get_appointments_for_doctor(doctor.id, date(2024, 5, 1), scheduling_db, patient_name='WALK')

    assert [appointment.id for appointment in appointments] == [alice_visit.id]


def test_blank_patient_name_does_not_filter(scheduling_db, make_doctor, make_patient, make_appointment) -> None:
    doctor = make_doctor()
    make_appointment(doctor, make_patient(), datetime(2024, 5, 1, 9, 0))

    assert len(get_appointments_for_doctor(doctor.id, date(2024, 5, 1), scheduling_db, patient_name='  ')) == 1


def test_doctor_query_treats_dash_and_blank_as_unset() -> None:
    query = DoctorQuery(name='-', specialty='  ', period='-')

    assert query == DoctorQuery()


@pytest.mark.parametrize(('raw', 'expected'), [('am', DayPeriod.AM), (' PM ', DayPeriod.PM), ('AM', DayPeriod.AM)])
def test_doctor_query_normalizes_period(raw: str, expected: DayPeriod) -> None:
    assert DoctorQuery(period=raw).period is expected


def test_doctor_query_rejects_unknown_period() -> None:
    with pytest.raises(ValidationError):
        DoctorQuery(period='evening')


def test_find_doctors_combines_filters(scheduling_db, make_doctor) -> None:
    house = make_doctor(name='Dr. Gregory House', specialty='Diagnostics', available_times=['09:00'])
    cuddy = make_doctor(name='Dr. Lisa Cuddy', specialty='Endocrinology', available_times=['09:00'])
    wilson = make_doctor(name='Dr. James Wilson', specialty='Oncology', available_times=['12:00-13:00'])

    assert [d.id for d in find_doctors(DoctorQuery(), scheduling_db)] == [house.id, wilson.id, cuddy.id]
    assert [d.id for d in find_doctors(DoctorQuery(name='house'), scheduling_db)] == [house.id]
    assert [d.id for d in find_doctors(DoctorQuery(specialty='oncology'), scheduling_db)] == [wilson.id]
    assert [d.id for d in find_doctors(DoctorQuery(period='pm'), scheduling_db)] == [wilson.id]
    assert find_doctors(DoctorQuery(name='dr.', specialty='diagnostics', period='pm'), scheduling_db) == []


def test_find_doctors_by_period_skips_doctors_without_slots(scheduling_db, make_doctor) -> None:
    make_doctor(name='Dr. Lisa Cuddy', available_times=[])

    assert find_doctors(DoctorQuery(period='am'), scheduling_db) == []


@pytest.fixture
def patient_history(make_doctor, make_patient, make_appointment):
    house = make_doctor()
    wilson = make_doctor(name='Dr. James Wilson', specialty='Oncology')
    alice = make_patient()
    bob = make_patient(name='Bob Marley')
    visits = {
        'house_done': make_appointment(house, alice, datetime(2024, 4, 2, 9, 0), status=AppointmentStatus.COMPLETED),
        'wilson_next': make_appointment(wilson, alice, datetime(2024, 5, 3, 10, 0)),
        'house_next': make_appointment(house, alice, datetime(2024, 5, 1, 11, 0)),
    }
    make_appointment(house, bob, datetime(2024, 5, 1, 9, 0))
    return alice, visits


def test_patient_query_treats_dash_and_blank_as_unset() -> None:
    query = PatientAppointmentQuery(condition='-', doctor_name='  ')

    assert query.condition is None
    assert query.doctor_name is None


@pytest.mark.parametrize('raw, expected', [('past', AppointmentCondition.PAST), (' FUTURE ', AppointmentCondition.FUTURE)])
def test_patient_query_normalizes_condition(raw: str, expected: AppointmentCondition) -> None:
    assert PatientAppointmentQuery(condition=raw).condition is expected


def test_patient_query_rejects_unknown_condition() -> None:
    with pytest.raises(ValidationError):
        PatientAppointmentQuery(condition='yesterday')


def test_appointments_for_patient_lists_only_own_appointments_in_time_order(scheduling_db, patient_history) -> None:
    alice, visits = patient_history

    appointments = get_appointments_for_patient(alice.id, PatientAppointmentQuery(), scheduling_db)

    assert [appointment.id for appointment in appointments] == [
        visits['house_done'].id,
        visits['house_next'].id,
        visits['wilson_next'].id,
    ]


@pytest.mark.parametrize(
    'condition, expected_keys',
    [('past', ['house_done']), ('future', ['house_next', 'wilson_next'])],
)
def test_appointments_for_patient_filter_by_condition(
    scheduling_db, patient_history, condition: str, expected_keys: list[str]
) -> None:
    alice, visits = patient_history

    appointments = get_appointments_for_patient(
        alice.id, PatientAppointmentQuery(condition=condition), scheduling_db
    )

    assert [appointment.id for appointment in appointments] == [visits[key].id for key in expected_keys]


def test_appointments_for_patient_combine_condition_and_doctor_name(scheduling_db, patient_history) -> None:
    alice, visits = patient_history

    future_with_house = get_appointments_for_patient(
        alice.id, PatientAppointmentQuery(condition='future', doctor_name='HOUSE'), scheduling_db
    )
    with_wilson = get_appointments_for_patient(
        alice.id, PatientAppointmentQuery(doctor_name='wils'), scheduling_db
    )

    assert [appointment.id for appointment in future_with_house] == [visits['house_next'].id]
    assert [appointment.id for appointment in with_wilson] == [visits['wilson_next'].id]

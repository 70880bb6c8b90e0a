from datetime import datetime

import pytest

from clinic_backend.models.appointment import Appointment
from clinic_backend.scheduling.status import (
    AppointmentStatus,
    StatusTransitionError,
    is_allowed_transition,
    set_status,
)


def test_set_status_on_missing_appointment_is_silent(scheduling_db) -> None:
    set_status(999, AppointmentStatus.COMPLETED, scheduling_db)

    assert scheduling_db.query(Appointment).count() == 0


def test_set_status_completes_scheduled_appointment(
    scheduling_db, make_doctor, make_patient, make_appointment
) -> None:
    appointment = make_appointment(make_doctor(), make_patient(), datetime(2024, 5, 1, 9, 0))

    set_status(appointment.id, AppointmentStatus.COMPLETED, scheduling_db)

    assert scheduling_db.get(Appointment, appointment.id).status == AppointmentStatus.COMPLETED


def test_completing_twice_is_idempotent(scheduling_db, make_doctor, make_patient, make_appointment) -> None:
    appointment = make_appointment(
        make_doctor(), make_patient(), datetime(2024, 5, 1, 9, 0), status=int(AppointmentStatus.COMPLETED)
    )

    set_status(appointment.id, AppointmentStatus.COMPLETED, scheduling_db)

    assert scheduling_db.get(Appointment, appointment.id).status == AppointmentStatus.COMPLETED


def test_completed_appointment_cannot_be_rescheduled(
    scheduling_db, make_doctor, make_patient, make_appointment
) -> None:
    appointment = make_appointment(
        make_doctor(), make_patient(), datetime(2024, 5, 1, 9, 0), status=int(AppointmentStatus.COMPLETED)
    )

    with pytest.raises(StatusTransitionError):
        set_status(appointment.id, AppointmentStatus.SCHEDULED, scheduling_db)


@pytest.mark.parametrize(
    ('current', 'target', 'allowed'),
    [
        (AppointmentStatus.SCHEDULED, AppointmentStatus.COMPLETED, True),
        (AppointmentStatus.SCHEDULED, AppointmentStatus.SCHEDULED, True),
        (AppointmentStatus.COMPLETED, AppointmentStatus.COMPLETED, True),
        (AppointmentStatus.COMPLETED, AppointmentStatus.SCHEDULED, False),
    ],
)
def test_is_allowed_transition(current: AppointmentStatus, target: AppointmentStatus, allowed: bool) -> None:
    assert is_allowed_transition(current, target) is allowed

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_backend.auth.dependencies import require_admin
from clinic_backend.auth.identity import Principal
from clinic_backend.database import get_db
from clinic_backend.routes import common
from clinic_backend.scheduling.availability import get_doctor_availability
from clinic_backend.scheduling.doctors import DoctorRemovalOutcome, remove_doctor
from clinic_backend.scheduling.queries import DoctorQuery, find_doctors
from clinic_backend.schemas.doctor import AvailabilityResponse, DoctorResponse

router = APIRouter(tags=['doctors'])


@router.get('', response_model=list[DoctorResponse])
def search_doctors(
    name: str | None = Query(default=None),
    specialty: str | None = Query(default=None),
    time: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    try:
        query = DoctorQuery(name=name, specialty=specialty, period=time)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Time must be AM or PM.') from exc

    try:
        return find_doctors(query, db)
    except SQLAlchemyError as exc:
        raise common.database_unavailable() from exc


@router.get('/{doctor_id}/availability/{availability_date}', response_model=AvailabilityResponse)
def get_availability(doctor_id: int, availability_date: date, db: Session = Depends(get_db)):
    try:
        available_times = get_doctor_availability(doctor_id, availability_date, db)
    except SQLAlchemyError as exc:
        raise common.database_unavailable() from exc

    return AvailabilityResponse(doctor_id=doctor_id, date=availability_date, available_times=available_times)


@router.delete('/{doctor_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_doctor(
    doctor_id: int,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    del principal
    common.ensure_database_ready()

    outcome = remove_doctor(doctor_id, db)
    if outcome is DoctorRemovalOutcome.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Doctor not found.')
    if outcome is DoctorRemovalOutcome.INTERNAL_ERROR:
        raise common.database_unavailable()

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from clinic_backend.auth.dependencies import require_doctor
from clinic_backend.auth.identity import Principal
from clinic_backend.database import get_db
from clinic_backend.routes import common
from clinic_backend.scheduling.prescriptions import PrescriptionOutcome, get_prescription, record_prescription
from clinic_backend.schemas.prescription import PrescriptionIn, PrescriptionResponse

router = APIRouter(tags=['prescriptions'])

PRESCRIPTION_ERRORS = {
    PrescriptionOutcome.APPOINTMENT_NOT_FOUND: (status.HTTP_404_NOT_FOUND, 'Appointment not found.'),
    PrescriptionOutcome.PRESCRIPTION_NOT_FOUND: (
        status.HTTP_404_NOT_FOUND,
        'No prescription found for this appointment.',
    ),
    PrescriptionOutcome.UNAUTHORIZED: (
        status.HTTP_403_FORBIDDEN,
        'Only the doctor of this appointment can access its prescription.',
    ),
    PrescriptionOutcome.INTERNAL_ERROR: (
        status.HTTP_503_SERVICE_UNAVAILABLE,
        common.DATABASE_UNAVAILABLE_DETAIL,
    ),
}


def raise_for_prescription_outcome(outcome: PrescriptionOutcome) -> None:
    if outcome in PRESCRIPTION_ERRORS:
        status_code, detail = PRESCRIPTION_ERRORS[outcome]
        raise HTTPException(status_code=status_code, detail=detail)


@router.post('', response_model=PrescriptionResponse, status_code=status.HTTP_201_CREATED)
def create_prescription(
    data: PrescriptionIn,
    principal: Principal = Depends(require_doctor),
    db: Session = Depends(get_db),
):
    common.ensure_database_ready()

    result = record_prescription(data, principal.id, db)
    raise_for_prescription_outcome(result.outcome)
    return result.prescription


@router.get('/{appointment_id}', response_model=PrescriptionResponse)
def read_prescription(
    appointment_id: int,
    principal: Principal = Depends(require_doctor),
    db: Session = Depends(get_db),
):
    common.ensure_database_ready()

    try:
        result = get_prescription(appointment_id, principal.id, db)
    except SQLAlchemyError as exc:
        raise common.database_unavailable() from exc

    raise_for_prescription_outcome(result.outcome)
    return result.prescription

"""Request and response models for prescriptions."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator


class PrescriptionIn(BaseModel):
    appointment_id: int
    patient_name: str
    medication: str
    dosage: str
    doctor_notes: str | None = None

    @field_validator('patient_name', 'medication', 'dosage')
    @classmethod
    def require_text(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Field is required.')
        return normalized


class PrescriptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    appointment_id: int | None
    patient_name: str
    medication: str
    dosage: str
    doctor_notes: str | None = None
    issued_at: datetime

"""Request and response models for appointments."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from clinic_backend.scheduling.status import AppointmentStatus

MAX_REASON_LENGTH = 500


class EntityRef(BaseModel):
    id: int


class AppointmentIn(BaseModel):
    id: int | None = None
    doctor: EntityRef
    patient: EntityRef
    appointment_time: datetime
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    reason: str | None = None

    @field_validator('appointment_time')
    @classmethod
    def truncate_to_minute(cls, value: datetime) -> datetime:
        return value.replace(second=0, microsecond=0)

    @field_validator('reason')
    @classmethod
    def validate_reason(cls, value: str | None) -> str | None:
        if value is None:
            return None

        normalized = value.strip()
        if not normalized:
            return None

        if len(normalized) > MAX_REASON_LENGTH:
            raise ValueError(f'Reason must be {MAX_REASON_LENGTH} characters or fewer.')

        return normalized


class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    doctor_id: int
    patient_id: int
    appointment_time: datetime
    status: AppointmentStatus
    reason: str | None = None

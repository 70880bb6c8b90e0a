"""Response models for doctors."""

from datetime import date

from pydantic import BaseModel, ConfigDict


class DoctorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    specialty: str
    email: str | None = None
    phone: str | None = None
    available_times: list[str]


class AvailabilityResponse(BaseModel):
    doctor_id: int
    date: date
    available_times: list[str]

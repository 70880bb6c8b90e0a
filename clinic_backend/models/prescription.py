"""Prescription model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from clinic_backend.database import Base


class Prescription(Base):
    """Represents a prescription issued at the end of an appointment."""
    __tablename__ = "prescriptions"

    id = Column(Integer, primary_key=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id", ondelete="SET NULL"), index=True)
    patient_name = Column(String, nullable=False)
    medication = Column(String, nullable=False)
    dosage = Column(String, nullable=False)
    doctor_notes = Column(String)
    issued_at = Column(DateTime, default=datetime.now)

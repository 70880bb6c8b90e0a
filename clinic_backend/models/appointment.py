"""Appointment model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from clinic_backend.database import Base


class Appointment(Base):
    """Represents a booked slot between a doctor and a patient."""
    __tablename__ = "appointments"
    __table_args__ = (
        # One live appointment per doctor and instant, enforced by the store.
        Index("uq_appointments_doctor_time", "doctor_id", "appointment_time", unique=True),
    )

    id = Column(Integer, primary_key=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    appointment_time = Column(DateTime, nullable=False)
    status = Column(Integer, nullable=False, default=0)  # see AppointmentStatus
    reason = Column(String)

    doctor = relationship("Doctor", back_populates="appointments")
    patient = relationship("Patient", back_populates="appointments")

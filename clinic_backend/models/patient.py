"""Patient model definitions."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from clinic_backend.database import Base


class Patient(Base):
    """Represents a patient who books appointments."""
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    email = Column(String, unique=True, index=True)
    phone = Column(String)
    address = Column(String)

    appointments = relationship("Appointment", back_populates="patient")

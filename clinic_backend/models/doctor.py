"""Doctor model definitions."""

from sqlalchemy import Column, Integer, JSON, String
from sqlalchemy.orm import relationship

from clinic_backend.database import Base


class Doctor(Base):
    """Represents a doctor and the recurring slots they can be booked in."""
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    specialty = Column(String, nullable=False)
    email = Column(String, unique=True, index=True)
    phone = Column(String)
    available_times = Column(JSON, nullable=False, default=list)  # "09:00" or "09:00-10:00"

    appointments = relationship("Appointment", back_populates="doctor", passive_deletes=True)

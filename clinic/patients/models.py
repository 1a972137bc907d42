"""
Patient Model - Stores patient demographic information.

Patients are registered by reception at intake and referenced by
appointments and follow-ups.
"""
from sqlalchemy import Column, Integer, String, DateTime, Date, func
from sqlalchemy.orm import relationship
from ..database import Base

class Patient(Base):
    """
    Patient Model - Stores patient information
    
    Fields:
    - id: Primary key for patient
    - name: Patient's full name
    - phone: Contact number
    - dob: Date of birth (optional)
    - gender: Patient's gender (optional)
    - created_at: When the patient was registered
    """
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=False)
    dob = Column(Date, nullable=True)
    gender = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    appointments = relationship("Appointment", back_populates="patient")
    followups = relationship("Followup", back_populates="patient")

    def __repr__(self):
        """String representation of the Patient model"""
        return f"<Patient(id={self.id}, name='{self.name}')>"

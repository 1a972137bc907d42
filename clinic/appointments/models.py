"""
Appointment Models - Service catalogue and scheduled patient visits.

An appointment occupies the half-open interval [start_time, end_time),
where end_time is derived from the booked service's duration.
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, JSON, Numeric, Enum, func
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import enum
from ..database import Base

class AppointmentStatus(str, enum.Enum):
    """Enum for appointment status"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    IN_CONSULT = "in_consult"
    COMPLETED = "completed"
    CANCELED = "canceled"

class Service(Base):
    """
    Service Model - A bookable clinic service
    
    Fields:
    - id: Primary key for service
    - name: Service name shown on bookings and invoices
    - duration_minutes: Time the service occupies on the calendar
    - price: Amount invoiced on completion
    """
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)
    duration_minutes = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)

    def __repr__(self):
        """String representation of the Service model"""
        return f"<Service(id={self.id}, name='{self.name}', duration={self.duration_minutes})>"

class Appointment(Base):
    """
    Appointment Model - Stores appointment information
    
    Fields:
    - id: Primary key for appointment
    - branch_id: Branch where the visit takes place
    - doctor_id: Doctor seeing the patient
    - patient_id: Foreign key to Patient model
    - service_id: Foreign key to Service model
    - start_time: Start of the visit (clinic local time)
    - end_time: start_time + service duration
    - status: Current status of the appointment
    - checked_in_time: When the patient checked in at reception
    - vitals: Vitals recorded during consultation (bp, temp, weight)
    - notes: Clinical notes
    - prescription: Prescription items written during consultation
    - invoice_id: Invoice raised on completion
    - reminder_sent: Whether a reminder was sent to the patient
    - created_at: When the appointment was created
    - updated_at: When the appointment was last updated
    """
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    patient_id = Column(Integer, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    status = Column(Enum(AppointmentStatus, name="appointment_status"), default=AppointmentStatus.CONFIRMED, nullable=False)
    checked_in_time = Column(DateTime, nullable=True)
    vitals = Column(JSON, nullable=True)
    notes = Column(String, nullable=True)
    prescription = Column(JSON, nullable=True)
    invoice_id = Column(Integer, nullable=True)
    reminder_sent = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    patient = relationship("Patient", back_populates="appointments")
    service = relationship("Service")

    def __repr__(self):
        """String representation of the Appointment model"""
        return f"<Appointment(id={self.id}, patient_id={self.patient_id}, start='{self.start_time}', status='{self.status}')>"

    @property
    def service_name(self) -> str:
        """Get the booked service's name"""
        return self.service.name if self.service else None

    def update_status(self, status: AppointmentStatus) -> None:
        """
        Update appointment status
        
        Args:
            status: New appointment status
        """
        self.status = status
        if status == AppointmentStatus.CHECKED_IN:
            self.checked_in_time = datetime.now()
        self.updated_at = datetime.now(timezone.utc)

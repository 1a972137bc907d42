"""
Appointment Schemas - Pydantic models for booking, status changes and slots.
"""
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator
from datetime import datetime, date
from decimal import Decimal
from .models import AppointmentStatus
from ..patients.schemas import PatientResponse

class ServiceResponse(BaseModel):
    """Service catalogue entry"""
    id: int
    name: str
    duration_minutes: int
    price: Decimal

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True

class Slot(BaseModel):
    """
    Slot Schema - A candidate appointment start time (derived, never stored)

    Fields:
    - time: Start time of day in HH:MM
    - start_time: Start of the candidate interval
    - end_time: End of the candidate interval (start + service duration)
    - is_recommended: Whether the slot abuts an existing booking or block
    """
    time: str
    start_time: datetime
    end_time: datetime
    is_recommended: bool = False

class AppointmentCreate(BaseModel):
    """
    Appointment Booking Schema - Used when booking one of the computed slots

    Fields:
    - patient_id: Patient being booked
    - service_id: Service to book (fixes the duration)
    - date: Day of the visit
    - time: Selected slot start in HH:MM
    - branch_id: Branch of the visit
    - doctor_id: Doctor (defaults to the clinic's configured doctor)
    """
    patient_id: int
    service_id: int
    visit_date: date = Field(..., alias="date", description="Day of the visit")
    time: str = Field(..., description="Slot start time in 24-hour format (HH:MM)")
    branch_id: int
    doctor_id: Optional[int] = None

    @field_validator("time")
    @classmethod
    def validate_time_format(cls, v):
        """Validate time format is HH:MM"""
        try:
            hour, minute = map(int, v.split(":"))
            if not (0 <= hour <= 23 and 0 <= minute <= 59):
                raise ValueError
        except ValueError:
            raise ValueError("Time must be in HH:MM format")
        return f"{hour:02d}:{minute:02d}"

class AppointmentStatusUpdate(BaseModel):
    """Appointment Status Update Schema"""
    status: AppointmentStatus = Field(..., description="New appointment status")

    class Config:
        """Configuration for Pydantic model"""
        json_schema_extra = {
            "example": {
                "status": "checked_in"
            }
        }

class Vitals(BaseModel):
    """Vitals recorded at consultation"""
    bp: str = Field(..., description="Blood pressure, e.g. 120/80")
    temp: float = Field(..., description="Temperature in Celsius")
    weight: float = Field(..., gt=0, description="Weight in kg")

class PrescriptionItem(BaseModel):
    """One line of a prescription"""
    medicine: str
    dosage: str
    frequency: str
    duration: str

class ConsultationComplete(BaseModel):
    """
    Consultation Completion Schema - Clinical payload saved when a visit completes

    Fields:
    - vitals: Vitals recorded during the visit
    - notes: Clinical notes
    - prescription: Prescription items
    """
    vitals: Vitals
    notes: str = ""
    prescription: List[PrescriptionItem] = Field(default_factory=list)

class AppointmentResponse(BaseModel):
    """Appointment Response Schema"""
    id: int
    branch_id: int
    doctor_id: int
    patient: PatientResponse
    service_id: int
    service_name: str
    start_time: datetime
    end_time: datetime
    status: AppointmentStatus
    checked_in_time: Optional[datetime] = None
    vitals: Optional[Vitals] = None
    notes: Optional[str] = None
    prescription: Optional[List[PrescriptionItem]] = None
    invoice_id: Optional[int] = None
    reminder_sent: bool

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True

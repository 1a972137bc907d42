"""
Patient Schemas - Pydantic models for patient intake and history.
"""
from typing import Optional, Literal, List
from pydantic import BaseModel, Field
from datetime import date

class PatientCreate(BaseModel):
    """
    Patient Intake Schema - Used when registering a new patient
    
    Fields:
    - name: Patient's full name
    - phone: Contact number
    - dob: Date of birth (optional)
    - gender: Patient's gender (optional)
    """
    name: str = Field(..., min_length=1, description="Patient's full name")
    phone: str = Field(..., min_length=1, description="Contact number")
    dob: Optional[date] = Field(None, description="Date of birth")
    gender: Optional[str] = Field(None, description="Patient's gender")

class PatientResponse(BaseModel):
    """Patient Response Schema"""
    id: int
    name: str
    phone: str
    dob: Optional[date] = None
    gender: Optional[str] = None

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True

class HistoryItem(BaseModel):
    """
    Patient History Item - One follow-up or appointment on the patient's timeline
    
    Fields:
    - type: "followup" or "appointment"
    - id: ID of the underlying record
    - event_date: Scheduled date (follow-up) or start date (appointment)
    - status: Status of the underlying record
    - service_name: Service booked (appointments only)
    - notes: Free-text notes
    """
    type: Literal["followup", "appointment"]
    id: int
    event_date: date
    status: str
    service_name: Optional[str] = None
    notes: Optional[str] = None

class PatientHistoryResponse(BaseModel):
    """Patient history, newest events first"""
    patient: PatientResponse
    history: List[HistoryItem]

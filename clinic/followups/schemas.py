"""
Follow-up Schemas - Pydantic models for follow-up tasks and their transitions.
"""
from typing import Optional, List, Literal, Dict
from pydantic import BaseModel, Field
from datetime import date, time
from .models import FollowupStatus, Priority, RecurrenceType
from ..patients.schemas import PatientResponse

StatusFilter = Literal["all", "pending", "snoozed"]

class Recurrence(BaseModel):
    """
    Recurrence rule
    
    Fields:
    - type: Unit of the interval (daily, weekly, monthly)
    - interval: Number of units between occurrences
    - days: Days of week for weekly rules (0 = Monday)
    """
    type: RecurrenceType
    interval: int = Field(..., ge=1)
    days: Optional[List[int]] = None

class FollowupCreate(BaseModel):
    """Follow-up Creation Schema - Used at intake"""
    patient_id: int
    doctor_id: int
    branch_id: int
    scheduled_date: date
    scheduled_time: Optional[time] = None
    priority: Priority = Priority.NORMAL
    recurrence: Optional[Recurrence] = None
    notes: Optional[str] = None

class FollowupResponse(BaseModel):
    """Follow-up Response Schema"""
    id: int
    patient: PatientResponse
    doctor_id: int
    branch_id: int
    scheduled_date: date
    scheduled_time: Optional[time] = None
    status: FollowupStatus
    priority: Priority
    recurrence: Optional[Recurrence] = None
    notes: Optional[str] = None
    created_by: int

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True

class SnoozeRequest(BaseModel):
    """Snooze Request Schema"""
    days: int = Field(1, ge=1, description="Number of days to push the follow-up by")

class BulkDoneRequest(BaseModel):
    """Bulk Mark-Done Request Schema"""
    ids: List[int] = Field(..., min_length=1)

class BulkSnoozeRequest(BaseModel):
    """Bulk Snooze Request Schema"""
    ids: List[int] = Field(..., min_length=1)
    days: int = Field(1, ge=1)

class BulkResult(BaseModel):
    """Outcome of a fully successful bulk operation"""
    processed: int

class FollowupCounts(BaseModel):
    """Pending follow-ups per ISO date"""
    counts: Dict[date, int]

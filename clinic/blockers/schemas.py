"""
Blocker Schemas - Pydantic models for doctor calendar blocks.
"""
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from datetime import datetime

class BlockerCreate(BaseModel):
    """
    Blocker Creation Schema
    
    Fields:
    - start_time: Start of the blocked interval
    - end_time: End of the blocked interval, must be after start_time
    - reason: Why the time is blocked
    - doctor_id: Doctor to block (defaults to the acting doctor)
    """
    start_time: datetime
    end_time: datetime
    reason: str = Field(..., min_length=1, description="Reason for blocking the time")
    doctor_id: Optional[int] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_clinic_local(cls, v):
        """Blocker times are clinic-local; reject values carrying a UTC offset"""
        if v.tzinfo is not None:
            raise ValueError("Use clinic-local time without a UTC offset")
        return v

class BlockerResponse(BaseModel):
    """Blocker Response Schema"""
    id: int
    doctor_id: int
    start_time: datetime
    end_time: datetime
    reason: str

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True

"""
Follow-up Model - Scheduled non-appointment contact tasks.

A follow-up belongs to exactly one calendar date at a time: snoozing moves
the record to a later date, it never duplicates it.
"""
from sqlalchemy import Column, Integer, String, Date, Time, DateTime, ForeignKey, JSON, Enum, func
from sqlalchemy.orm import relationship
import enum
from ..database import Base

class FollowupStatus(str, enum.Enum):
    """Enum for follow-up status"""
    PENDING = "pending"
    DONE = "done"
    SNOOZED = "snoozed"
    CANCELED = "canceled"

class Priority(str, enum.Enum):
    """Enum for follow-up priority"""
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"

class RecurrenceType(str, enum.Enum):
    """Enum for recurrence units"""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

class Followup(Base):
    """
    Followup Model - Stores follow-up tasks
    
    Fields:
    - id: Primary key for follow-up
    - patient_id: Patient to contact
    - doctor_id: Responsible doctor
    - branch_id: Branch the task belongs to
    - scheduled_date: Day the task is due
    - scheduled_time: Optional time of day
    - status: pending, done, snoozed or canceled
    - priority: low, normal, high or urgent
    - recurrence: Optional rule {"type": ..., "interval": ..., "days": [...]}
    - notes: Free-text notes
    - created_by: User who created the task
    - created_at: When the follow-up was created
    - updated_at: When the follow-up was last updated
    """
    __tablename__ = "followups"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False)
    doctor_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False, index=True)
    scheduled_date = Column(Date, nullable=False, index=True)
    scheduled_time = Column(Time, nullable=True)
    status = Column(Enum(FollowupStatus, name="followup_status"), default=FollowupStatus.PENDING, nullable=False)
    priority = Column(Enum(Priority, name="followup_priority"), default=Priority.NORMAL, nullable=False)
    recurrence = Column(JSON, nullable=True)
    notes = Column(String, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    patient = relationship("Patient", back_populates="followups")

    def __repr__(self):
        """String representation of the Followup model"""
        return f"<Followup(id={self.id}, patient_id={self.patient_id}, date='{self.scheduled_date}', status='{self.status}')>"

    @property
    def is_closed(self) -> bool:
        """Done and canceled follow-ups accept no further transitions"""
        return self.status in (FollowupStatus.DONE, FollowupStatus.CANCELED)

"""
Calendar Blocker Model - Doctor time that cannot be booked.

A blocker occupies [start_time, end_time) for slot-conflict purposes
exactly like an appointment, but is never billed and has no status.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from ..database import Base

class CalendarBlocker(Base):
    """
    CalendarBlocker Model - Stores doctor-unavailable intervals
    
    Fields:
    - id: Primary key for blocker
    - doctor_id: Doctor whose calendar is blocked
    - start_time: Start of the blocked interval
    - end_time: End of the blocked interval (exclusive)
    - reason: Free-text reason (e.g. Lunch Break)
    - created_at: When the blocker was created
    """
    __tablename__ = "calendar_blockers"

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    reason = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        """String representation of the CalendarBlocker model"""
        return f"<CalendarBlocker(id={self.id}, doctor_id={self.doctor_id}, start='{self.start_time}', end='{self.end_time}')>"

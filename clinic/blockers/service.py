"""
Blocker Service - Creation, lookup and removal of doctor calendar blocks.
"""
from typing import List, Dict, Any
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging
from datetime import date

from ..exceptions import ResourceNotFoundException, StoreUnavailableException, SchedulingValidationException
from ..appointments.service import day_bounds
from .models import CalendarBlocker

# Set up logging
logger = logging.getLogger(__name__)

def list_blockers_for_date(db: Session, day: date, doctor_id: int) -> List[CalendarBlocker]:
    """
    Get a doctor's blockers starting on a day, ordered by start time.

    Args:
        db: Database session
        day: Calendar day
        doctor_id: Doctor whose calendar is queried

    Returns:
        List[CalendarBlocker]: Blockers of the day
    """
    start, end = day_bounds(day)
    return (
        db.query(CalendarBlocker)
        .filter(
            CalendarBlocker.doctor_id == doctor_id,
            CalendarBlocker.start_time >= start,
            CalendarBlocker.start_time < end
        )
        .order_by(CalendarBlocker.start_time)
        .all()
    )

def create_blocker(db: Session, fields: Dict[str, Any]) -> CalendarBlocker:
    """
    Block time on a doctor's calendar.

    Args:
        db: Database session
        fields: doctor_id, start_time, end_time and reason

    Returns:
        CalendarBlocker: Created blocker

    Raises:
        SchedulingValidationException: If fields are missing, carry a UTC offset,
            or do not form a same-day interval with end after start
        StoreUnavailableException: If the blocker cannot be saved
    """
    missing = [name for name in ("doctor_id", "start_time", "end_time", "reason") if not fields.get(name)]
    if missing:
        raise SchedulingValidationException(f"Missing blocker fields: {', '.join(missing)}")
    if fields["start_time"].tzinfo is not None or fields["end_time"].tzinfo is not None:
        raise SchedulingValidationException("Blocker times must be clinic-local, without a UTC offset")
    if fields["end_time"] <= fields["start_time"]:
        raise SchedulingValidationException("End time must be after start time")
    # Blockers never span midnight
    if fields["end_time"].date() != fields["start_time"].date():
        raise SchedulingValidationException("A blocker must start and end on the same day")

    blocker = CalendarBlocker(
        doctor_id=fields["doctor_id"],
        start_time=fields["start_time"],
        end_time=fields["end_time"],
        reason=fields["reason"]
    )
    db.add(blocker)

    try:
        db.commit()
        db.refresh(blocker)
        logger.info(f"Blocker {blocker.id} created for doctor {blocker.doctor_id}: {blocker.reason}")
        return blocker
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating blocker for doctor {fields['doctor_id']}: {str(e)}")
        raise StoreUnavailableException("An error occurred while blocking the time")

def delete_blocker(db: Session, blocker_id: int) -> None:
    """
    Remove a blocker.

    Raises:
        ResourceNotFoundException: If blocker not found
        StoreUnavailableException: If the deletion cannot be committed
    """
    blocker = db.query(CalendarBlocker).filter(CalendarBlocker.id == blocker_id).first()
    if not blocker:
        raise ResourceNotFoundException("Blocker not found")

    try:
        db.delete(blocker)
        db.commit()
        logger.info(f"Blocker {blocker_id} deleted")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error deleting blocker {blocker_id}: {str(e)}")
        raise StoreUnavailableException("An error occurred while deleting the blocker")

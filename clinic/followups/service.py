"""
Follow-up Service - Persistence of follow-up tasks.

This module provides session-bound CRUD for follow-ups and the calendar
counts shown on the month view. State transitions live in lifecycle.py.
"""
from typing import List, Optional, Dict, Any
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging
from datetime import date, datetime, timezone

from ..exceptions import ResourceNotFoundException, StoreUnavailableException, SchedulingValidationException
from ..patients.models import Patient
from .models import Followup, FollowupStatus

# Set up logging
logger = logging.getLogger(__name__)

def get_followup(db: Session, followup_id: int) -> Followup:
    """
    Get a follow-up by ID.

    Args:
        db: Database session
        followup_id: ID of the follow-up

    Returns:
        Followup: The follow-up

    Raises:
        ResourceNotFoundException: If follow-up not found
    """
    followup = db.query(Followup).filter(Followup.id == followup_id).first()
    if not followup:
        raise ResourceNotFoundException("Follow-up not found")
    return followup

def list_followups_for_date(db: Session, day: date, branch_id: Optional[int] = None) -> List[Followup]:
    """
    Get the follow-ups scheduled on a day, excluding canceled ones.

    Args:
        db: Database session
        day: Calendar day
        branch_id: Restrict to one branch (None for all branches)

    Returns:
        List[Followup]: Follow-ups in creation order
    """
    query = db.query(Followup).filter(
        Followup.scheduled_date == day,
        Followup.status != FollowupStatus.CANCELED
    )
    if branch_id is not None:
        query = query.filter(Followup.branch_id == branch_id)
    return query.order_by(Followup.id).all()

def create_followup(db: Session, fields: Dict[str, Any]) -> Followup:
    """
    Create a follow-up.

    Args:
        db: Database session
        fields: patient_id, doctor_id, branch_id, scheduled_date, created_by and
            optional scheduled_time, status, priority, recurrence, notes

    Returns:
        Followup: Created follow-up

    Raises:
        SchedulingValidationException: If a required field is missing
        ResourceNotFoundException: If the patient does not exist
        StoreUnavailableException: If the follow-up cannot be saved
    """
    required = ("patient_id", "doctor_id", "branch_id", "scheduled_date", "created_by")
    missing = [name for name in required if fields.get(name) is None]
    if missing:
        raise SchedulingValidationException(f"Missing follow-up fields: {', '.join(missing)}")

    patient = db.query(Patient).filter(Patient.id == fields["patient_id"]).first()
    if not patient:
        raise ResourceNotFoundException("Patient not found")

    followup = Followup(**fields)
    db.add(followup)

    try:
        db.commit()
        db.refresh(followup)
        logger.info(f"Follow-up {followup.id} created for patient {patient.id} on {followup.scheduled_date}")
        return followup
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating follow-up for patient {patient.id}: {str(e)}")
        raise StoreUnavailableException("An error occurred while creating the follow-up")

def update_followup(db: Session, followup_id: int, fields: Dict[str, Any]) -> Followup:
    """
    Apply a partial update to a follow-up.

    Args:
        db: Database session
        followup_id: ID of the follow-up
        fields: Attributes to overwrite

    Returns:
        Followup: Updated follow-up

    Raises:
        ResourceNotFoundException: If follow-up not found
        StoreUnavailableException: If the update cannot be committed
    """
    followup = get_followup(db, followup_id)

    for field, value in fields.items():
        setattr(followup, field, value)
    followup.updated_at = datetime.now(timezone.utc)

    try:
        db.commit()
        db.refresh(followup)
        logger.info(f"Follow-up {followup_id} updated: {sorted(fields)}")
        return followup
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating follow-up {followup_id}: {str(e)}")
        raise StoreUnavailableException("An error occurred while updating the follow-up")

def count_pending_followups(
    db: Session,
    start: date,
    end: date,
    branch_id: Optional[int] = None
) -> Dict[date, int]:
    """
    Count pending follow-ups per day within an inclusive date range.

    Args:
        db: Database session
        start: First day of the range
        end: Last day of the range
        branch_id: Restrict to one branch (None for all branches)

    Returns:
        Dict[date, int]: Number of pending follow-ups for each day that has any
    """
    query = db.query(Followup.scheduled_date).filter(
        Followup.scheduled_date >= start,
        Followup.scheduled_date <= end,
        Followup.status == FollowupStatus.PENDING
    )
    if branch_id is not None:
        query = query.filter(Followup.branch_id == branch_id)

    counts: Dict[date, int] = {}
    for (scheduled_date,) in query.all():
        counts[scheduled_date] = counts.get(scheduled_date, 0) + 1
    return counts

def list_followups_for_patient(db: Session, patient_id: int) -> List[Followup]:
    """Get every follow-up of a patient, whatever its status."""
    return db.query(Followup).filter(Followup.patient_id == patient_id).order_by(Followup.id).all()

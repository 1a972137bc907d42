"""
Patient Service - Intake, search and history of patients.
"""
from typing import List, Dict, Any
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import or_
import logging

from ..exceptions import ResourceNotFoundException, StoreUnavailableException
from ..appointments.models import Appointment
from ..followups.service import list_followups_for_patient
from .models import Patient
from .schemas import HistoryItem

# Set up logging
logger = logging.getLogger(__name__)

def get_patient(db: Session, patient_id: int) -> Patient:
    """
    Get a patient by ID.

    Raises:
        ResourceNotFoundException: If patient not found
    """
    patient = db.query(Patient).filter(Patient.id == patient_id).first()
    if not patient:
        raise ResourceNotFoundException("Patient not found")
    return patient

def create_patient(db: Session, fields: Dict[str, Any]) -> Patient:
    """
    Register a new patient.

    Args:
        db: Database session
        fields: name, phone and optional dob, gender

    Returns:
        Patient: Created patient

    Raises:
        StoreUnavailableException: If the patient cannot be saved
    """
    patient = Patient(**fields)
    db.add(patient)

    try:
        db.commit()
        db.refresh(patient)
        logger.info(f"Patient {patient.id} registered")
        return patient
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error registering patient: {str(e)}")
        raise StoreUnavailableException("An error occurred while registering the patient")

def search_patients(db: Session, search_term: str) -> List[Patient]:
    """
    Find patients by name (case-insensitive) or phone number substring.

    An empty search term returns no patients rather than the whole register.

    Args:
        db: Database session
        search_term: Text typed at reception

    Returns:
        List[Patient]: Matching patients
    """
    search_term = (search_term or "").strip()
    if not search_term:
        return []
    return (
        db.query(Patient)
        .filter(
            or_(
                Patient.name.ilike(f"%{search_term}%"),
                Patient.phone.contains(search_term)
            )
        )
        .order_by(Patient.id)
        .all()
    )

def get_patient_history(db: Session, patient_id: int) -> List[HistoryItem]:
    """
    Build a patient's timeline of follow-ups and appointments, newest first.

    Args:
        db: Database session
        patient_id: ID of the patient

    Returns:
        List[HistoryItem]: Follow-ups dated by scheduled date and appointments
            dated by their start day
    """
    get_patient(db, patient_id)

    history = [
        HistoryItem(
            type="followup",
            id=followup.id,
            event_date=followup.scheduled_date,
            status=followup.status.value,
            notes=followup.notes
        )
        for followup in list_followups_for_patient(db, patient_id)
    ]
    appointments = db.query(Appointment).filter(Appointment.patient_id == patient_id).order_by(Appointment.id).all()
    history.extend(
        HistoryItem(
            type="appointment",
            id=appointment.id,
            event_date=appointment.start_time.date(),
            status=appointment.status.value,
            service_name=appointment.service_name,
            notes=appointment.notes
        )
        for appointment in appointments
    )

    history.sort(key=lambda item: item.event_date, reverse=True)
    return history

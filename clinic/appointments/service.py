"""
Appointment Service - Business logic for bookings and the visit status machine.

This module provides session-bound functions for the service catalogue,
appointment queries and creation, status transitions, consultation
completion and reminders.
"""
from typing import List, Optional, Dict, Any
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging
from datetime import date, datetime, time, timedelta, timezone

from ..exceptions import (
    ResourceNotFoundException,
    StoreUnavailableException,
    SchedulingValidationException,
    InvalidTransitionException,
)
from ..patients.models import Patient
from ..billing.service import create_invoice_for_appointment
from .models import Appointment, AppointmentStatus, Service

# Set up logging
logger = logging.getLogger(__name__)

# Forward-only visit flow; completed and canceled are terminal
ALLOWED_TRANSITIONS: Dict[AppointmentStatus, List[AppointmentStatus]] = {
    AppointmentStatus.PENDING: [AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELED],
    AppointmentStatus.CONFIRMED: [
        AppointmentStatus.CHECKED_IN,
        AppointmentStatus.IN_CONSULT,
        AppointmentStatus.CANCELED,
    ],
    AppointmentStatus.CHECKED_IN: [AppointmentStatus.IN_CONSULT, AppointmentStatus.CANCELED],
    AppointmentStatus.IN_CONSULT: [AppointmentStatus.COMPLETED, AppointmentStatus.CANCELED],
    AppointmentStatus.COMPLETED: [],
    AppointmentStatus.CANCELED: [],
}

def day_bounds(day: date):
    """Return the [start, end) datetimes covering a calendar day."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)

def list_services(db: Session) -> List[Service]:
    """
    Get the service catalogue.

    Args:
        db: Database session

    Returns:
        List[Service]: All bookable services
    """
    return db.query(Service).order_by(Service.id).all()

def get_service(db: Session, service_id: int) -> Service:
    """
    Get a service by ID.

    Args:
        db: Database session
        service_id: ID of the service

    Returns:
        Service: The service

    Raises:
        ResourceNotFoundException: If service not found
    """
    service = db.query(Service).filter(Service.id == service_id).first()
    if not service:
        raise ResourceNotFoundException("Service not found")
    return service

def get_appointment(db: Session, appointment_id: int) -> Appointment:
    """
    Get an appointment by ID.

    Args:
        db: Database session
        appointment_id: ID of the appointment

    Returns:
        Appointment: The appointment

    Raises:
        ResourceNotFoundException: If appointment not found
    """
    appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
    if not appointment:
        raise ResourceNotFoundException("Appointment not found")
    return appointment

def list_appointments_for_date(db: Session, day: date, branch_id: Optional[int] = None) -> List[Appointment]:
    """
    Get the appointments starting on a day, ordered by start time.

    Args:
        db: Database session
        day: Calendar day
        branch_id: Restrict to one branch (None for all branches)

    Returns:
        List[Appointment]: Appointments of the day
    """
    start, end = day_bounds(day)
    query = db.query(Appointment).filter(Appointment.start_time >= start, Appointment.start_time < end)
    if branch_id is not None:
        query = query.filter(Appointment.branch_id == branch_id)
    return query.order_by(Appointment.start_time).all()

def create_appointment(db: Session, fields: Dict[str, Any]) -> Appointment:
    """
    Create an appointment; the end time is derived from the service duration.

    Args:
        db: Database session
        fields: patient_id, service_id, start_time, branch_id, doctor_id and optional status

    Returns:
        Appointment: Created appointment

    Raises:
        SchedulingValidationException: If a required field is missing
        ResourceNotFoundException: If the patient or service does not exist
        StoreUnavailableException: If the appointment cannot be saved
    """
    required = ("patient_id", "service_id", "start_time", "branch_id", "doctor_id")
    missing = [name for name in required if fields.get(name) is None]
    if missing:
        raise SchedulingValidationException(f"Missing appointment fields: {', '.join(missing)}")

    service = get_service(db, fields["service_id"])
    patient = db.query(Patient).filter(Patient.id == fields["patient_id"]).first()
    if not patient:
        raise ResourceNotFoundException("Patient not found")

    start_time = fields["start_time"]
    appointment = Appointment(
        patient_id=patient.id,
        service_id=service.id,
        branch_id=fields["branch_id"],
        doctor_id=fields["doctor_id"],
        start_time=start_time,
        end_time=start_time + timedelta(minutes=service.duration_minutes),
        status=fields.get("status", AppointmentStatus.CONFIRMED),
        reminder_sent=False
    )
    db.add(appointment)

    try:
        db.commit()
        db.refresh(appointment)
        logger.info(f"Appointment {appointment.id} booked for patient {patient.id} at {start_time}")
        return appointment
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating appointment for patient {patient.id}: {str(e)}")
        raise StoreUnavailableException("An error occurred while creating the appointment")

def update_appointment(db: Session, appointment_id: int, fields: Dict[str, Any]) -> Appointment:
    """
    Apply a partial update to an appointment.

    Completing an appointment that has no invoice yet raises one in the
    same transaction. Changing the start time or the service recomputes
    the end time; a caller-supplied end_time is ignored.

    Args:
        db: Database session
        appointment_id: ID of the appointment
        fields: Attributes to overwrite

    Returns:
        Appointment: Updated appointment

    Raises:
        ResourceNotFoundException: If appointment or new service not found
        StoreUnavailableException: If the update cannot be committed
    """
    appointment = get_appointment(db, appointment_id)

    # The interval always follows the booked service
    reschedule = "start_time" in fields or "service_id" in fields
    service = get_service(db, fields.get("service_id", appointment.service_id)) if reschedule else None

    status = fields.get("status")
    for field, value in fields.items():
        if field not in ("status", "end_time"):
            setattr(appointment, field, value)
    if service is not None:
        appointment.service = service
        appointment.end_time = appointment.start_time + timedelta(minutes=service.duration_minutes)
    if status is not None:
        appointment.update_status(AppointmentStatus(status))
    else:
        appointment.updated_at = datetime.now(timezone.utc)

    try:
        if appointment.status == AppointmentStatus.COMPLETED and not appointment.invoice_id:
            create_invoice_for_appointment(db, appointment)
        db.commit()
        db.refresh(appointment)
        logger.info(f"Appointment {appointment_id} updated: {sorted(fields)}")
        return appointment
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating appointment {appointment_id}: {str(e)}")
        raise StoreUnavailableException("An error occurred while updating the appointment")

def check_transition(appointment: Appointment, target: AppointmentStatus) -> None:
    """
    Validate a status change against the visit flow.

    Raises:
        InvalidTransitionException: If the target is not reachable from the current status
    """
    current = AppointmentStatus(appointment.status)
    if target not in ALLOWED_TRANSITIONS[current]:
        logger.warning(f"Rejected appointment {appointment.id} transition {current.value} -> {target.value}")
        raise InvalidTransitionException(current.value, target.value)

def change_appointment_status(db: Session, appointment_id: int, target: AppointmentStatus) -> Appointment:
    """
    Move an appointment along the visit flow (check-in, consult, cancel...).

    Args:
        db: Database session
        appointment_id: ID of the appointment
        target: Requested status

    Returns:
        Appointment: Updated appointment
    """
    appointment = get_appointment(db, appointment_id)
    check_transition(appointment, target)
    return update_appointment(db, appointment_id, {"status": target})

def complete_consultation(db: Session, appointment_id: int, payload: Dict[str, Any]) -> Appointment:
    """
    Save the clinical payload and complete the appointment.

    Args:
        db: Database session
        appointment_id: ID of the appointment
        payload: vitals, notes and prescription items

    Returns:
        Appointment: Completed appointment, linked to its invoice
    """
    appointment = get_appointment(db, appointment_id)
    check_transition(appointment, AppointmentStatus.COMPLETED)
    fields = dict(payload)
    fields["status"] = AppointmentStatus.COMPLETED
    return update_appointment(db, appointment_id, fields)

def send_reminder(db: Session, appointment_id: int) -> Appointment:
    """
    Mark that a reminder was sent for an upcoming appointment.

    Raises:
        InvalidTransitionException: If the appointment is already completed or canceled
    """
    appointment = get_appointment(db, appointment_id)
    if appointment.status in (AppointmentStatus.COMPLETED, AppointmentStatus.CANCELED):
        raise InvalidTransitionException(
            appointment.status.value, "reminder_sent",
            detail="Reminders can only be sent for upcoming appointments"
        )
    return update_appointment(db, appointment_id, {"reminder_sent": True})

"""
Appointment Router - Booking, availability and visit-flow endpoints.
"""
from typing import List, Optional
from datetime import date
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..core.dependencies import get_store, require_permission, scoped_branch
from ..core.permissions import Permission
from ..store import ClinicStore
from ..users.models import User
from .availability import find_available_slots, book_slot
from .schemas import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentStatusUpdate,
    ConsultationComplete,
    ServiceResponse,
    Slot,
)
from .service import (
    list_services,
    change_appointment_status,
    complete_consultation,
    send_reminder,
)

router = APIRouter()

@router.get("/services", response_model=List[ServiceResponse])
async def get_services(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.VIEW_APPOINTMENTS))
):
    """
    List the bookable services and their durations
    """
    return list_services(db)

@router.get("/", response_model=List[AppointmentResponse])
async def list_appointments(
    day: date = Query(..., alias="date", description="Day to list"),
    branch_id: Optional[int] = Query(None, description="Branch (omit for all branches)"),
    store: ClinicStore = Depends(get_store),
    current_user: User = Depends(require_permission(Permission.VIEW_APPOINTMENTS))
):
    """
    List a day's appointments, earliest first

    Receptionists always see their own branch.
    """
    return await store.fetch_appointments(day, scoped_branch(current_user, branch_id))

@router.get("/slots", response_model=List[Slot])
async def get_available_slots(
    day: date = Query(..., alias="date", description="Day to book"),
    service_id: int = Query(..., description="Service to book"),
    branch_id: int = Query(..., description="Branch of the visit"),
    doctor_id: Optional[int] = Query(None, description="Doctor (defaults to the clinic doctor)"),
    store: ClinicStore = Depends(get_store),
    current_user: User = Depends(require_permission(Permission.CREATE_APPOINTMENT))
):
    """
    Compute the bookable slots for a day

    Recommended slots (adjacent to existing bookings) come first.
    An empty list means there is no availability.
    """
    return await find_available_slots(
        store,
        day,
        service_id,
        scoped_branch(current_user, branch_id),
        doctor_id or settings.default_doctor_id
    )

@router.post("/", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def create_appointment(
    booking: AppointmentCreate,
    store: ClinicStore = Depends(get_store),
    current_user: User = Depends(require_permission(Permission.CREATE_APPOINTMENT))
):
    """
    Book a confirmed appointment at one of the computed slots

    Returns 409 if the slot was taken since availability was shown.
    """
    return await book_slot(
        store,
        patient_id=booking.patient_id,
        service_id=booking.service_id,
        day=booking.visit_date,
        slot_time=booking.time,
        branch_id=scoped_branch(current_user, booking.branch_id),
        doctor_id=booking.doctor_id or settings.default_doctor_id
    )

@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: int,
    status_data: AppointmentStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.UPDATE_APPOINTMENT))
):
    """
    Move an appointment along the visit flow

    Check-in, start consultation or cancel. Completion goes through
    the consultation endpoint so the clinical payload is saved.
    """
    return change_appointment_status(db, appointment_id, status_data.status)

@router.post("/{appointment_id}/complete", response_model=AppointmentResponse)
async def complete_appointment(
    appointment_id: int,
    consultation: ConsultationComplete,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.COMPLETE_CONSULTATION))
):
    """
    Save the consultation and complete the appointment

    Completion raises a pending invoice for the service.
    """
    return complete_consultation(db, appointment_id, consultation.model_dump())

@router.post("/{appointment_id}/reminder", response_model=AppointmentResponse)
async def remind_patient(
    appointment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.UPDATE_APPOINTMENT))
):
    """
    Record that an appointment reminder was sent
    """
    return send_reminder(db, appointment_id)

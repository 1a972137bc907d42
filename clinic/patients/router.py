"""
Patient Router - Intake, search and history endpoints.
"""
from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..core.dependencies import require_permission
from ..core.permissions import Permission
from ..users.models import User
from .schemas import PatientCreate, PatientResponse, PatientHistoryResponse
from .service import create_patient, search_patients, get_patient, get_patient_history

router = APIRouter()

@router.post("/", response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
async def register_patient(
    patient_data: PatientCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.CREATE_PATIENT))
):
    """
    Register a new patient at intake
    """
    return create_patient(db, patient_data.model_dump())

@router.get("/", response_model=List[PatientResponse])
async def find_patients(
    search: str = Query("", description="Name or phone fragment"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.VIEW_PATIENTS))
):
    """
    Search patients by name or phone number

    An empty search returns an empty list.
    """
    return search_patients(db, search)

@router.get("/{patient_id}/history", response_model=PatientHistoryResponse)
async def patient_history(
    patient_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.VIEW_PATIENTS))
):
    """
    Get a patient's follow-ups and appointments, newest first
    """
    history = get_patient_history(db, patient_id)
    return PatientHistoryResponse(patient=get_patient(db, patient_id), history=history)
